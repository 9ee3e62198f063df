"""Selection state and list/map synchronization."""

from uhi_engine.selection.state import SelectionState, SelectionStore
from uhi_engine.selection.synchronizer import SelectionSynchronizer

__all__ = ["SelectionState", "SelectionStore", "SelectionSynchronizer"]
