"""Layers and the ordered stack that holds them."""

from __future__ import annotations

from typing import Iterator

from eis.events import Event
from eis.timestep import TimeStep


class Layer:
    """A unit of update, UI and event handling; override the hooks needed."""

    def __init__(self, name: str = "Layer") -> None:
        self.name = name

    def on_attach(self) -> None:
        """Called when the layer is pushed onto an application."""

    def on_detach(self) -> None:
        """Called when the layer is removed."""

    def on_update(self, ts: TimeStep) -> None:
        """Called once per frame."""

    def on_imgui_render(self) -> None:
        """Called once per frame while the UI frame is open."""

    def on_event(self, event: Event) -> None:
        """Called for each event reaching this layer."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class LayerStack:
    """Layers in front, overlays after them; iteration goes bottom to top."""

    def __init__(self) -> None:
        self._layers: list[Layer] = []
        self._insert_index = 0

    @staticmethod
    def _index_of(items: list[Layer], target: Layer) -> int | None:
        return next((i for i, item in enumerate(items) if item is target), None)

    def push_layer(self, layer: Layer) -> None:
        self._layers.insert(self._insert_index, layer)
        self._insert_index += 1

    def push_overlay(self, overlay: Layer) -> None:
        self._layers.append(overlay)

    def pop_layer(self, layer: Layer) -> bool:
        """Detach and remove ``layer`` if it is among the layers; report whether it was."""
        index = self._index_of(self._layers[: self._insert_index], layer)
        if index is None:
            return False
        layer.on_detach()
        del self._layers[index]
        self._insert_index -= 1
        return True

    def pop_overlay(self, overlay: Layer) -> bool:
        """Detach and remove ``overlay`` if it is among the overlays; report whether it was."""
        index = self._index_of(self._layers[self._insert_index:], overlay)
        if index is None:
            return False
        overlay.on_detach()
        del self._layers[self._insert_index + index]
        return True

    def clear(self) -> None:
        """Detach every layer and overlay, bottom to top, and empty the stack."""
        for layer in self._layers:
            layer.on_detach()
        self._layers.clear()
        self._insert_index = 0

    def __iter__(self) -> Iterator[Layer]:
        return iter(list(self._layers))

    def __reversed__(self) -> Iterator[Layer]:
        return reversed(list(self._layers))

    def __len__(self) -> int:
        return len(self._layers)