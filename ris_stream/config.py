"""YAML configuration loader for the RIS Live stream client."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Sequence

import yaml

from ris_stream.feeds.ris.session import DEFAULT_CLIENT, RIS_URL, Subscription

ENV_URL = "RIS_STREAM_URL"
ENV_CLIENT = "RIS_STREAM_CLIENT"

_TOP_LEVEL_KEYS = {"url", "client", "subscriptions", "strict", "max_messages"}
_SUBSCRIPTION_KEYS = {f.name for f in fields(Subscription)}


@dataclass
class StreamConfig:
    url: str = RIS_URL
    client: str = DEFAULT_CLIENT
    subscriptions: Sequence[Subscription] = field(default_factory=list)
    strict: bool = False
    max_messages: int | None = None


def _parse_subscription(entry: Any) -> Subscription:
    if not isinstance(entry, dict):
        raise ValueError("each subscription must be a mapping")

    unknown = set(entry) - _SUBSCRIPTION_KEYS
    if unknown:
        raise ValueError(f"unknown subscription keys: {', '.join(sorted(unknown))}")

    values = dict(entry)
    for key in ("more_specific", "less_specific"):
        if key in values and not isinstance(values[key], bool):
            raise ValueError(f"subscription '{key}' must be a boolean")
    # YAML reads "path: 3333" as an int; RIS Live wants strings
    for key in ("host", "type", "require", "peer", "path", "prefix"):
        if values.get(key) is not None:
            values[key] = str(values[key])

    return Subscription(**values)


def _parse_subscriptions(entries: Iterable[Any]) -> List[Subscription]:
    return [_parse_subscription(entry) for entry in entries]


def parse_config(data: Mapping[str, Any]) -> StreamConfig:
    if not isinstance(data, dict):
        raise ValueError("Stream configuration must be a mapping")

    unknown = set(data) - _TOP_LEVEL_KEYS
    if unknown:
        raise ValueError(f"unknown configuration keys: {', '.join(sorted(unknown))}")

    subscriptions_section = data.get("subscriptions") or []
    if not isinstance(subscriptions_section, list):
        raise ValueError("'subscriptions' section must be a list")

    strict = data.get("strict", False)
    if not isinstance(strict, bool):
        raise ValueError("'strict' must be a boolean")

    max_messages = data.get("max_messages")
    if max_messages is not None:
        max_messages = int(max_messages)
        if max_messages < 0:
            raise ValueError("'max_messages' must not be negative")

    return StreamConfig(
        url=str(data.get("url", RIS_URL)),
        client=str(data.get("client", DEFAULT_CLIENT)),
        subscriptions=_parse_subscriptions(subscriptions_section),
        strict=strict,
        max_messages=max_messages,
    )


def load_config(path: Path) -> StreamConfig:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        data = {}
    return parse_config(data)


def apply_environment(
    config: StreamConfig, environ: Mapping[str, str] | None = None
) -> StreamConfig:
    """Return ``config`` with RIS_STREAM_URL / RIS_STREAM_CLIENT applied."""
    env = os.environ if environ is None else environ
    overrides = {}
    if env.get(ENV_URL):
        overrides["url"] = env[ENV_URL]
    if env.get(ENV_CLIENT):
        overrides["client"] = env[ENV_CLIENT]
    return replace(config, **overrides) if overrides else config
