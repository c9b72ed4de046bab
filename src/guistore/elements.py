"""GUI elements as seen by the checkbox layer.

The layer never renders anything. It reads and writes the checked state of
elements the host already drew, and walks their children. Anything with the
attributes of ElementLike works; Element is a plain in-memory version used
by hosts without a widget tree of their own, and by the tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol

CHECKBOX = "checkbox"
RADIOBUTTON = "radiobutton"


class ElementLike(Protocol):
    name: str
    type: str
    state: bool
    valid: bool
    player_index: int

    @property
    def children(self) -> Iterable[ElementLike]: ...


@dataclass(eq=False)
class Element:
    """A node in an element tree."""

    name: str
    type: str = "flow"
    state: bool = False
    player_index: int = 0
    valid: bool = True
    children: list[Element] = field(default_factory=list)
    parent: Element | None = field(default=None, repr=False)

    def add(self, name: str, type: str = "flow", **kwargs) -> Element:
        """Append a child with the same player and return it."""
        kwargs.setdefault("player_index", self.player_index)
        child = Element(name, type, parent=self, **kwargs)
        self.children.append(child)
        return child

    def destroy(self) -> None:
        """Invalidate this element and everything below it."""
        self.valid = False
        for child in self.children:
            child.destroy()
        if self.parent is not None and self in self.parent.children:
            self.parent.children.remove(self)


def by_player(element: ElementLike) -> str:
    """Categorize function giving every player their own state."""
    return f"player:{element.player_index}"
