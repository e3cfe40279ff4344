"""
RIPE RIS Live feed mock.

Builds ``ris_message`` packets exactly as RIS Live sends them over the
websocket, for tests and offline demonstrations. Timestamps, collectors and
identifiers are caller supplied so the output is deterministic.
"""

from typing import Any, Dict, List, Optional
import json


class RISFeedMock:
    """
    Mock RIS Live packet generator.

    Produces packets in the RIS Live wire schema, one UPDATE per call.
    """

    def __init__(
        self,
        host: str = "rrc00",
        peer: str = "192.0.2.1",
        peer_asn: int = 3333,
    ):
        """
        Args:
            host: RIS collector ID (e.g., rrc00, rrc01)
            peer: IP address of the peer reporting the route
            peer_asn: ASN of the peer reporting the route
        """
        self.host = host
        self.peer = peer
        self.peer_asn = peer_asn

    def _packet(self, timestamp: float, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "type": "ris_message",
            "data": {
                "timestamp": timestamp,
                "peer": self.peer,
                "peer_asn": str(self.peer_asn),
                "id": f"{timestamp}-{self.host}-{self.peer}",
                "host": self.host,
                "type": "UPDATE",
                **data,
            },
        }

    def generate_update(
        self,
        timestamp: float,
        prefixes: List[str],
        as_path: List[int],
        next_hop: str = "192.0.2.1",
        origin: str = "IGP",
        communities: Optional[List[str]] = None,
        withdrawals: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """
        Generate a RIS Live UPDATE announcing ``prefixes``.

        Args:
            timestamp: Unix timestamp
            prefixes: IP prefixes reachable via ``next_hop``
            as_path: List of AS numbers in the path
            next_hop: Next hop IP address
            origin: BGP origin type (IGP, EGP, INCOMPLETE)
            communities: BGP communities as "asn:value" or "asn:v1:v2" strings
            withdrawals: Prefixes withdrawn in the same UPDATE

        Returns:
            Dict matching the RIS Live schema
        """
        data: Dict[str, Any] = {
            "path": as_path,
            "origin": origin,
            "announcements": [{"next_hop": next_hop, "prefixes": prefixes}],
        }

        if communities:
            data["community"] = [[int(part) for part in c.split(":")] for c in communities]

        if withdrawals is not None:
            data["withdrawals"] = withdrawals

        return self._packet(timestamp, data)

    def generate_withdrawal(
        self,
        timestamp: float,
        prefixes: List[str],
    ) -> Dict[str, Any]:
        """
        Generate a RIS Live UPDATE that only withdraws ``prefixes``.
        """
        return self._packet(timestamp, {"withdrawals": prefixes})

    @staticmethod
    def to_json(packet: Dict[str, Any]) -> str:
        """Serialise a packet the way it travels over the websocket."""
        return json.dumps(packet, separators=(",", ":"))


if __name__ == "__main__":
    # Example usage
    feed = RISFeedMock(host="rrc00", peer_asn=3333)

    update = feed.generate_update(
        timestamp=1700000000.25,
        prefixes=["203.0.113.0/24"],
        as_path=[3333, 64500],
        communities=["3333:100", "64500:999"],
    )

    print("RIS UPDATE:")
    print(json.dumps(update, indent=2))

    print("\nWire format:")
    print(RISFeedMock.to_json(feed.generate_withdrawal(1700000001.0, ["198.51.100.0/24"])))
