"""Tests for LayerVisibility and LayerVisibilityStore."""

import pytest

from uhi_engine.comms.event_bus import EventBus
from uhi_engine.errors import UnknownLayer
from uhi_engine.layers import DEFAULT_LAYER_BINDINGS, LayerVisibility, LayerVisibilityStore
from uhi_engine.layers.bindings import layer_names


@pytest.fixture
def initial():
    return LayerVisibility.all_active(layer_names(DEFAULT_LAYER_BINDINGS))


@pytest.mark.unit
class TestLayerVisibility:
    """Immutable flag set."""

    def test_default_layers_all_on(self, initial):
        assert initial.names == ("intensity", "health", "vegetation", "boundaries")
        assert initial.active() == initial.names

    def test_toggle_flips_exactly_one(self, initial):
        toggled = initial.toggle("health")
        assert toggled.is_active("health") is False
        for name in ("intensity", "vegetation", "boundaries"):
            assert toggled.is_active(name) is True

    def test_toggle_returns_new_value(self, initial):
        toggled = initial.toggle("health")
        assert initial.is_active("health") is True
        assert toggled is not initial

    def test_double_toggle_restores(self, initial):
        assert initial.toggle("vegetation").toggle("vegetation") == initial

    def test_unknown_layer(self, initial):
        with pytest.raises(UnknownLayer) as exc:
            initial.toggle("traffic")
        assert exc.value.layer == "traffic"
        with pytest.raises(UnknownLayer):
            initial.is_active("traffic")

    def test_key_set_is_fixed(self, initial):
        assert set(initial.toggle("intensity").names) == set(initial.names)

    def test_hash_and_eq(self, initial):
        same = LayerVisibility(initial.as_dict())
        assert same == initial
        assert hash(same) == hash(initial)
        assert initial != initial.toggle("boundaries")

    def test_as_dict_is_a_copy(self, initial):
        d = initial.as_dict()
        d["intensity"] = False
        assert initial.is_active("intensity")


@pytest.mark.unit
class TestLayerVisibilityStore:
    """Current state plus change events."""

    def test_toggle_updates_state_and_publishes(self, initial):
        bus = EventBus()
        q = bus.subscribe()
        store = LayerVisibilityStore(initial, event_bus=bus)
        store.toggle("health")
        assert store.is_active("health") is False
        msg = q.get_nowait()
        assert msg["type"] == "layers-changed"
        assert msg["data"]["layer"] == "health"
        assert msg["data"]["layers"]["health"] is False

    def test_unknown_layer_leaves_state(self, initial):
        bus = EventBus()
        q = bus.subscribe()
        store = LayerVisibilityStore(initial, event_bus=bus)
        with pytest.raises(UnknownLayer):
            store.toggle("traffic")
        assert store.state == initial
        msg = q.get_nowait()
        assert msg == {"type": "diagnostic", "data": {"error": "UnknownLayer", "layer": "traffic"}}
        assert q.empty()

    def test_works_without_bus(self, initial):
        store = LayerVisibilityStore(initial)
        assert store.toggle("boundaries").is_active("boundaries") is False
