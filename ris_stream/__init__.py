"""
RIS Live BGP update stream client.

The package turns RIPE RIS Live packets into routing events and renders
them as fixed-width looking-glass lines:

- feeds.ris.envelope.decode: raw JSON text -> RawEnvelope
- engine.deriver.derive: RawEnvelope -> Announce / Withdraw events
- output.render: event -> lines

The stream processor and event bus wire these together over a live
RISLiveSession or a ReplayFeed.
"""

from ris_stream.engine.deriver import derive
from ris_stream.engine.event_bus import EventBus
from ris_stream.engine.pipeline import ProcessingStats, StreamProcessor, process_message
from ris_stream.events import Announce, AnnouncementVector, RoutingEvent, Withdraw
from ris_stream.feeds.ris.envelope import RawEnvelope, decode
from ris_stream.output import render
