"""
RIS Live websocket session.

A thin wrapper around a ``websockets`` client connection that knows how to
send RIS Live subscription requests and hands back raw text frames. It does
not decode anything, and it does not reconnect: a closed connection simply
ends the message stream.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator
from urllib.parse import urlencode, urlsplit

from websockets.exceptions import ConnectionClosed
from websockets.sync.client import connect as ws_connect

LOG = logging.getLogger(__name__)

RIS_URL = "wss://ris-live.ripe.net/v1/ws/"
DEFAULT_CLIENT = "ris-stream"


@dataclass(frozen=True)
class Subscription:
    """
    One ``ris_subscribe`` request.

    Unset fields are left out of the request, so an empty Subscription
    asks for every message RIS Live relays.
    """

    host: str | None = None
    type: str | None = None
    require: str | None = None
    peer: str | None = None
    path: str | None = None
    prefix: str | None = None
    more_specific: bool | None = None
    less_specific: bool | None = None

    WIRE_NAMES = {"more_specific": "moreSpecific", "less_specific": "lessSpecific"}

    def to_data(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for name in (
            "host",
            "type",
            "require",
            "peer",
            "path",
            "prefix",
            "more_specific",
            "less_specific",
        ):
            value = getattr(self, name)
            if value is not None:
                data[self.WIRE_NAMES.get(name, name)] = value
        return data

    def to_control(self) -> str:
        return json.dumps({"type": "ris_subscribe", "data": self.to_data()})


def session_url(url: str = RIS_URL, client: str | None = DEFAULT_CLIENT) -> str:
    """Append the ``client`` identifier to ``url`` unless it already has a query."""
    if not client or urlsplit(url).query:
        return url
    return f"{url}?{urlencode({'client': client})}"


class RISLiveSession:
    """
    An explicit RIS Live connection.

    Usage::

        with RISLiveSession() as session:
            session.subscribe_to_withdrawals()
            for raw in session.messages():
                ...
    """

    def __init__(
        self,
        url: str = RIS_URL,
        client: str | None = DEFAULT_CLIENT,
        connect: Callable[[str], Any] = ws_connect,
    ) -> None:
        self.url = session_url(url, client)
        self._connect = connect
        self._conn: Any = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> "RISLiveSession":
        if self._conn is None:
            LOG.info("connecting to %s", self.url)
            self._conn = self._connect(self.url)
        return self

    def close(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        conn.close()
        LOG.info("closed connection to %s", self.url)

    def __enter__(self) -> "RISLiveSession":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _connection(self) -> Any:
        if self._conn is None:
            raise RuntimeError("RIS Live session is not open")
        return self._conn

    def send_control(self, text: str) -> None:
        """Send a raw control message."""
        LOG.debug("sending %s", text)
        self._connection().send(text)

    def subscribe(self, subscription: Subscription) -> None:
        LOG.info("subscribing with %s", subscription.to_data() or "no filter")
        self.send_control(subscription.to_control())

    def subscribe_all(self, subscriptions: Iterable[Subscription]) -> None:
        for subscription in subscriptions:
            self.subscribe(subscription)

    def subscribe_to_withdrawals(self) -> None:
        """Subscribe to every update that carries withdrawals."""
        self.subscribe(Subscription(require="withdrawals"))

    def subscribe_asn_list(self, path_list: Iterable[int]) -> None:
        """Subscribe to updates whose AS path contains any of the given ASNs."""
        for asn in path_list:
            self.subscribe(Subscription(path=str(asn)))

    def next_message(self) -> str | None:
        """
        Block for the next text frame.

        Returns None once the connection is closed, cleanly or not.
        """
        try:
            message = self._connection().recv()
        except ConnectionClosed as exc:
            LOG.info("connection closed: %s", exc)
            self._conn = None
            return None

        if isinstance(message, bytes):
            return message.decode("utf-8", errors="replace")
        return message

    def messages(self) -> Iterator[str]:
        """Yield text frames until the stream ends."""
        while True:
            message = self.next_message()
            if message is None:
                return
            yield message
