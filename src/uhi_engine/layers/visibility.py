"""Layer visibility: which thematic layers are currently switched on.

``LayerVisibility`` is an immutable value; ``toggle`` returns a new value
with exactly one flag flipped.  ``LayerVisibilityStore`` owns the current
value and announces each accepted change as a ``layers-changed`` event.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

from loguru import logger

from uhi_engine.errors import UnknownLayer


class LayerVisibility:
    """Fixed set of layer keys, each with an on/off flag."""

    __slots__ = ("_flags",)

    def __init__(self, flags: Mapping[str, bool]) -> None:
        self._flags = MappingProxyType({str(k): bool(v) for k, v in flags.items()})

    @classmethod
    def all_active(cls, names: Iterable[str]) -> "LayerVisibility":
        return cls({name: True for name in names})

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._flags)

    def is_active(self, layer: str) -> bool:
        try:
            return self._flags[layer]
        except KeyError:
            raise UnknownLayer(layer) from None

    def toggle(self, layer: str) -> "LayerVisibility":
        """New state with ``layer`` flipped and every other flag unchanged."""
        if layer not in self._flags:
            raise UnknownLayer(layer)
        flags = dict(self._flags)
        flags[layer] = not flags[layer]
        return LayerVisibility(flags)

    def active(self) -> tuple[str, ...]:
        return tuple(name for name, on in self._flags.items() if on)

    def as_dict(self) -> dict[str, bool]:
        return dict(self._flags)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LayerVisibility):
            return NotImplemented
        return dict(self._flags) == dict(other._flags)

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._flags.items())))

    def __repr__(self) -> str:
        return f"LayerVisibility({dict(self._flags)!r})"


class LayerVisibilityStore:
    """Owner of the current LayerVisibility."""

    def __init__(self, initial: LayerVisibility, event_bus=None) -> None:
        self._state = initial
        self._event_bus = event_bus

    @property
    def state(self) -> LayerVisibility:
        return self._state

    def is_active(self, layer: str) -> bool:
        return self._state.is_active(layer)

    def toggle(self, layer: str) -> LayerVisibility:
        """Flip one layer and publish the change.

        Raises:
            UnknownLayer: If ``layer`` is not in the fixed set.  The current
                state is left untouched.
        """
        try:
            new_state = self._state.toggle(layer)
        except UnknownLayer as e:
            logger.warning(f"Layer toggle rejected: {e}")
            if self._event_bus is not None:
                self._event_bus.publish("diagnostic", {"error": "UnknownLayer", "layer": layer})
            raise

        self._state = new_state
        logger.debug(f"Layer {layer} -> {'on' if new_state.is_active(layer) else 'off'}")
        if self._event_bus is not None:
            self._event_bus.publish(
                "layers-changed",
                {"layer": layer, "layers": new_state.as_dict()},
            )
        return new_state
