"""Test configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ris_stream.feeds.ris.mock_feed import RISFeedMock  # noqa: E402


@pytest.fixture
def ris_feed() -> RISFeedMock:
    """Mock RIS Live feed reporting from AS65000 at rrc00."""
    return RISFeedMock(host="rrc00", peer="1.1.1.1", peer_asn=65000)


@pytest.fixture
def announce_packet() -> dict:
    """The single-prefix announcement used throughout the tests."""
    return {
        "type": "ris_message",
        "data": {
            "timestamp": 1.0,
            "peer": "1.1.1.1",
            "peer_asn": "65000",
            "id": "x",
            "host": "h",
            "type": "UPDATE",
            "path": [65001],
            "announcements": [
                {"next_hop": "2.2.2.2", "prefixes": ["10.0.0.0/24"]}
            ],
        },
    }


@pytest.fixture
def withdraw_packet() -> dict:
    """A withdrawal-only UPDATE."""
    return {
        "type": "ris_message",
        "data": {
            "timestamp": 1.0,
            "peer": "1.1.1.1",
            "peer_asn": "65000",
            "id": "x",
            "host": "h",
            "type": "UPDATE",
            "withdrawals": ["10.0.0.0/24"],
        },
    }


@pytest.fixture
def capture_file(tmp_path, ris_feed) -> Path:
    """A replay capture with an announcement, a keepalive and a withdrawal."""
    lines = [
        RISFeedMock.to_json(
            ris_feed.generate_update(
                timestamp=1700000000.0,
                prefixes=["203.0.113.0/24", "198.51.100.0/24"],
                as_path=[65000, 64500],
                next_hop="192.0.2.1",
            )
        ),
        '{"type":"ris_message","data":{"timestamp":1700000001.0,"peer":"1.1.1.1",'
        '"peer_asn":"65000","id":"k","host":"rrc00","type":"KEEPALIVE"}}',
        "",
        RISFeedMock.to_json(
            ris_feed.generate_withdrawal(1700000002.0, ["203.0.113.0/24"])
        ),
    ]
    path = tmp_path / "capture.jsonl"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
