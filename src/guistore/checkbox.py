"""Store-backed checkbox and radiobutton definitions.

A definition describes one kind of toggle element. With a store attached,
its checked state lives in the store: element events write to the store
and store changes are pushed back to every attached element of the same
category. Without a store, element events go straight to the
on_element_update handler.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from guistore.elements import CHECKBOX, RADIOBUTTON, ElementLike
from guistore.registry import Shape
from guistore.store import KeyedStore, ScalarStore, Store

if TYPE_CHECKING:
    from guistore.options import Controls, OptionSet


Categorize = Callable[[ElementLike], str]


class Checkbox:
    """Definition of a checkbox element."""

    type = CHECKBOX

    def __init__(self, controls: Controls, name: str) -> None:
        self.controls = controls
        self.name = name
        self.store: Store | None = None
        self.categorize: Categorize | None = None
        self.option_set: OptionSet | None = None
        self.option_name: str | None = None
        self.events: dict[str, Callable] = {}
        self._instances: dict[str | None, list[ElementLike]] = {}

    # --- Setup ---

    def add_store(self, categorize: Categorize | None = None) -> Checkbox:
        """Keep the checked state in a store, one value per category.

        categorize maps an element to its category, e.g. one per player.
        """
        if self.store is not None:
            raise ValueError(f"Definition {self.name!r} already has a store")
        manager = self.controls.manager
        self.categorize = categorize
        self.store = KeyedStore(manager) if categorize else ScalarStore(manager)
        self.store.watch(self._store_changed)
        return self

    def on_element_update(self, callback: Callable[[ElementLike, bool], None]) -> Checkbox:
        """callback(element, state) when an element's state changes."""
        self.events["on_element_update"] = callback
        return self

    def on_store_update(self, callback: Callable[[object, str | None], None]) -> Checkbox:
        """callback(value, category) when the stored value changes."""
        self.events["on_store_update"] = callback
        return self

    # --- Store access ---

    def category_of(self, element: ElementLike) -> str | None:
        return self.categorize(element) if self.categorize else None

    def get_store(self, category: str | None = None) -> object:
        if self.store is None:
            return None
        return self.store.read(category)

    def set_store(self, category: str | None, value: object) -> bool:
        """Write the stored value. Returns False when there is no store."""
        if self.store is None:
            return False
        self.store.write(value, category)
        return True

    # --- Elements ---

    def post_draw(self, element: ElementLike) -> None:
        """Attach a drawn element and give it the stored state."""
        category = self.category_of(element)
        self._instances.setdefault(category, []).append(element)
        if self.store is not None and self.get_store(category):
            element.state = True

    def handle_state_changed(self, element: ElementLike) -> None:
        """An element of this definition was toggled by its player."""
        if self.store is not None:
            self.set_store(self.category_of(element), element.state)
        else:
            self._element_updated(element, element.state)

    def instances(self, category: str | None = None) -> list[ElementLike]:
        """Valid attached elements; all of them when category is None."""
        if category is None:
            groups = list(self._instances)
        else:
            groups = [category]
        found = []
        for group in groups:
            alive = [e for e in self._instances.get(group, ()) if e.valid]
            self._instances[group] = alive
            found.extend(alive)
        return found

    def _element_updated(self, element: ElementLike, state: bool) -> None:
        handler = self.events.get("on_element_update")
        if handler:
            handler(element, state)

    def _store_changed(self, value: object, category: str | None) -> None:
        state = bool(value)
        for element in self.instances(category):
            element.state = state
            self._element_updated(element, state)
        handler = self.events.get("on_store_update")
        if handler:
            handler(value, category)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class RadioButton(Checkbox):
    """Definition of a radiobutton element, optionally part of an option set."""

    type = RADIOBUTTON

    def add_as_option(self, option_set: OptionSet | str, option_name: str | None = None) -> RadioButton:
        """Make this radiobutton one option of an option set.

        The option set then acts as the store: only one of its options can
        be true at a time.
        """
        self.controls.add_as_option(self, option_set, option_name)
        return self

    def set_store(self, category: str | None, value: object) -> bool:
        if self.option_set is None:
            return super().set_store(category, value)
        self.option_set.set_member(self, category, bool(value))
        return True

    def _write(self, category: str | None, state: bool) -> None:
        """Write this member's own boolean, bypassing the option set."""
        if category is None and self.store.shape is Shape.KEYED:
            # every category at once, only ever to clear
            if state:
                raise ValueError(f"Option {self.option_name!r} needs a category to be selected")
            self.store.erase()
            return
        self.store.write(state, category)
