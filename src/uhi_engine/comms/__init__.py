"""Internal messaging for the explorer core."""

from uhi_engine.comms.event_bus import EventBus

__all__ = ["EventBus"]
