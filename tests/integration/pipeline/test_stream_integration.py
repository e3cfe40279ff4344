"""
Integration tests: raw packets through decoder, deriver, bus and renderer.
"""
import json

import pytest

from ris_stream.engine.event_bus import EventBus
from ris_stream.engine.pipeline import StreamProcessor, process_message
from ris_stream.errors import InvalidAddress
from ris_stream.events import Announce, Withdraw
from ris_stream.feeds.ris.mock_feed import RISFeedMock
from ris_stream.feeds.ris.replay_feed import ReplayFeed
from ris_stream.output import EventAdapter, render


def lines_for(raw: str) -> list[str]:
    return [line for event in process_message(raw) for line in render(event)]


@pytest.mark.integration
class TestSingleMessageScenarios:
    """End-to-end rendering of individual packets."""

    def test_announcement_renders_one_line(self, announce_packet):
        events = process_message(json.dumps(announce_packet))

        assert len(events) == 1
        assert isinstance(events[0], Announce)
        assert list(render(events[0])) == [" 65000|A 10.0.0.0/24         |65001 "]

    def test_withdrawal_renders_one_line(self, withdraw_packet):
        events = process_message(json.dumps(withdraw_packet))

        assert len(events) == 1
        assert isinstance(events[0], Withdraw)
        assert list(render(events[0])) == [" 65000|W 10.0.0.0/24         "]

    def test_announce_and_withdraw_in_one_update(self, announce_packet):
        announce_packet["data"]["withdrawals"] = ["10.1.0.0/16"]

        assert lines_for(json.dumps(announce_packet)) == [
            " 65000|A 10.0.0.0/24         |65001 ",
            " 65000|W 10.1.0.0/16         ",
        ]

    def test_prefix_with_host_bits_renders_as_received(self, ris_feed):
        packet = ris_feed.generate_withdrawal(timestamp=1.0, prefixes=["10.0.0.1/24"])

        assert lines_for(RISFeedMock.to_json(packet)) == [" 65000|W 10.0.0.1/24         "]

    def test_two_prefixes_two_hops(self, ris_feed):
        packet = ris_feed.generate_update(
            timestamp=1.0,
            prefixes=["10.0.0.0/24", "10.0.1.0/24"],
            as_path=[65001, 65002],
            next_hop="2.2.2.2",
        )

        lines = lines_for(RISFeedMock.to_json(packet))

        assert len(lines) == 2
        for line in lines:
            assert line.startswith(" 65000|A ")
            assert line.endswith("|65001  65002 ")
        assert lines[0] != lines[1]

    def test_invalid_next_hop_is_reported(self, ris_feed):
        packet = ris_feed.generate_update(
            timestamp=1.0,
            prefixes=["10.0.0.0/24"],
            as_path=[65001],
            next_hop="not-an-ip",
        )

        with pytest.raises(InvalidAddress) as exc_info:
            process_message(RISFeedMock.to_json(packet))

        assert exc_info.value.field == "announcements[0].next_hop"
        assert exc_info.value.value == "not-an-ip"


@pytest.mark.integration
class TestReplayStream:
    """A replayed capture through the processor and bus."""

    def test_replay_capture_to_lines(self, capture_file):
        bus = EventBus()
        adapter = EventAdapter()
        lines = []
        withdrawals = []
        bus.subscribe(lambda event: lines.extend(adapter.transform(event)))
        bus.subscribe(withdrawals.append, kinds=[Withdraw])

        stats = StreamProcessor(bus).run(ReplayFeed(capture_file))

        assert stats.messages == 3
        assert stats.skipped == 1
        assert stats.announcements == 1
        assert stats.withdrawals == 1
        assert lines == [
            " 65000|A 203.0.113.0/24      |65000  64500 ",
            " 65000|A 198.51.100.0/24     |65000  64500 ",
            " 65000|W 203.0.113.0/24      ",
        ]
        assert [w.timestamp for w in withdrawals] == [1700000002.0]

    def test_processing_is_independent_per_message(self, ris_feed):
        good = RISFeedMock.to_json(ris_feed.generate_withdrawal(1.0, ["10.0.0.0/8"]))
        bad = RISFeedMock.to_json(ris_feed.generate_withdrawal(2.0, ["10.0.0.1/8"]))
        bus = EventBus()
        received = []
        bus.subscribe(received.append)

        stats = StreamProcessor(bus).run([good, bad, good])

        assert stats.derive_errors == 1
        assert [e.timestamp for e in received] == [1.0, 1.0]
        assert received[0] == received[1]
