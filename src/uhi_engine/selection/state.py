"""Selection state: the committed cluster and the marker whose popup is open.

``selected_id`` drives the detail panel; ``active_marker_id`` drives the
map popup.  Committing a selection sets both; hovering or dismissing a
popup touches only ``active_marker_id``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class SelectionState:
    selected_id: str | None = None
    active_marker_id: str | None = None

    def committed(self, cluster_id: str) -> "SelectionState":
        return SelectionState(selected_id=cluster_id, active_marker_id=cluster_id)

    def hovering(self, cluster_id: str) -> "SelectionState":
        return replace(self, active_marker_id=cluster_id)

    def without_popup(self) -> "SelectionState":
        return replace(self, active_marker_id=None)

    def to_dict(self) -> dict:
        return {"selected_id": self.selected_id, "active_marker_id": self.active_marker_id}


class SelectionStore:
    """Owner of the current SelectionState.

    Ids are not validated here; the SelectionSynchronizer checks them
    against the registry before calling in.
    """

    def __init__(self, event_bus=None) -> None:
        self._state = SelectionState()
        self._event_bus = event_bus

    @property
    def state(self) -> SelectionState:
        return self._state

    def commit(self, cluster_id: str) -> SelectionState:
        return self._set(self._state.committed(cluster_id))

    def hover(self, cluster_id: str) -> SelectionState:
        return self._set(self._state.hovering(cluster_id))

    def clear_active(self) -> SelectionState:
        return self._set(self._state.without_popup())

    def _set(self, new_state: SelectionState) -> SelectionState:
        if new_state == self._state:
            return self._state
        self._state = new_state
        if self._event_bus is not None:
            self._event_bus.publish("selection-changed", new_state.to_dict())
        return new_state
