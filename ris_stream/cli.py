# ris_stream/cli.py

from __future__ import annotations
import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import TextIO

import yaml
from websockets.exceptions import WebSocketException

from ris_stream.config import StreamConfig, apply_environment, load_config
from ris_stream.engine.event_bus import EventBus
from ris_stream.engine.pipeline import StreamProcessor
from ris_stream.errors import DecodeError, DeriveError
from ris_stream.events import RoutingEvent
from ris_stream.feeds.ris.replay_feed import ReplayFeed
from ris_stream.feeds.ris.session import RISLiveSession, Subscription
from ris_stream.output.adapter import EventAdapter

LOG = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ris-stream",
        description="Stream RIS Live BGP updates as looking-glass style lines",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a YAML configuration file",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="RIS Live websocket endpoint (overrides config and RIS_STREAM_URL)",
    )
    parser.add_argument(
        "--client",
        default=None,
        help="Client name sent to RIS Live (overrides config and RIS_STREAM_CLIENT)",
    )
    parser.add_argument(
        "--path",
        type=int,
        nargs="+",
        default=[],
        metavar="ASN",
        help="Subscribe to updates whose AS path contains any of these ASNs",
    )
    parser.add_argument(
        "--withdrawals",
        action="store_true",
        help="Subscribe to all updates carrying withdrawals",
    )
    parser.add_argument(
        "--replay",
        type=Path,
        default=None,
        help="Read captured packets (one JSON object per line) instead of connecting",
    )
    parser.add_argument(
        "--output-file",
        type=Path,
        default=None,
        help="Write lines to this file instead of stdout",
    )
    parser.add_argument(
        "--max-messages",
        type=int,
        default=None,
        help="Stop after reading this many messages",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Stop at the first malformed or inconsistent message",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def _resolve_config(args: argparse.Namespace, config: StreamConfig) -> StreamConfig:
    config = apply_environment(config)
    if args.url:
        config.url = args.url
    if args.client:
        config.client = args.client
    if args.strict:
        config.strict = True
    if args.max_messages is not None:
        config.max_messages = args.max_messages

    subscriptions = list(config.subscriptions)
    subscriptions.extend(Subscription(path=str(asn)) for asn in args.path)
    if args.withdrawals:
        subscriptions.append(Subscription(require="withdrawals"))
    config.subscriptions = subscriptions
    return config


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    if args.config is not None and not args.config.exists():
        print(f"Config file not found: {args.config}", file=sys.stderr)
        return 1

    if args.replay is not None and not args.replay.exists():
        print(f"Replay file not found: {args.replay}", file=sys.stderr)
        return 1

    try:
        config = load_config(args.config) if args.config else StreamConfig()
    except (OSError, ValueError, TypeError, yaml.YAMLError) as exc:
        print(f"Failed to load config: {exc}", file=sys.stderr)
        return 2

    config = _resolve_config(args, config)

    output: TextIO = sys.stdout
    if args.output_file is not None:
        try:
            args.output_file.parent.mkdir(parents=True, exist_ok=True)
            output = args.output_file.open("w", encoding="utf-8")
        except OSError as exc:
            print(f"Failed to open output file: {exc}", file=sys.stderr)
            return 4

    event_bus = EventBus()
    adapter = EventAdapter()

    def handle_event(event: RoutingEvent) -> None:
        for line in adapter.transform(event):
            print(line, file=output)

    event_bus.subscribe(handle_event)
    processor = StreamProcessor(event_bus, strict=config.strict)

    try:
        if args.replay is not None:
            processor.run(ReplayFeed(args.replay), limit=config.max_messages)
        else:
            with RISLiveSession(url=config.url, client=config.client) as session:
                session.subscribe_all(config.subscriptions or [Subscription()])
                processor.run(session.messages(), limit=config.max_messages)
    except (DecodeError, DeriveError) as exc:
        print(f"Stream stopped on invalid message: {exc}", file=sys.stderr)
        return 3
    except (OSError, WebSocketException) as exc:
        print(f"Stream failed: {exc}", file=sys.stderr)
        return 3
    except KeyboardInterrupt:  # pragma: no cover - interactive only
        LOG.info("interrupted, shutting down")
    finally:
        event_bus.close()
        if output is not sys.stdout:
            output.close()

    stats = processor.stats
    LOG.info(
        "processed %d messages: %d announcements, %d withdrawals, %d skipped, %d errors",
        stats.messages,
        stats.announcements,
        stats.withdrawals,
        stats.skipped,
        stats.errors,
    )
    return 0


if __name__ == "__main__":

    signal.signal(signal.SIGPIPE, signal.SIG_DFL)  # Ignore broken pipe
    sys.exit(main())
