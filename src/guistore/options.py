"""Option sets — groups of radiobuttons where only one can be true.

An option set stores the name of the selected option, per category when a
categorize function is given. Whenever that changes, every member's own
boolean store is rewritten to (option == selected) for the category, and
only then is the set's callback called.

Usage:
    controls = Controls(manager)
    difficulty = controls.new_option_set(
        "difficulty",
        lambda value, category: print(category, "picked", value),
        by_player,
    )
    easy = controls.new_radiobutton("easy").add_as_option(difficulty, "Easy")
    hard = controls.new_radiobutton("hard").add_as_option(difficulty, "Hard")
    manager.lock()

    hard.set_store("player:1", True)
    easy.get_store("player:1")  # False
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable, Mapping
from typing import Callable

from guistore.checkbox import Categorize, Checkbox, RadioButton
from guistore.elements import RADIOBUTTON, ElementLike
from guistore.errors import WatcherError
from guistore.manager import StoreManager
from guistore.store import DerivedStore, KeyedStore, ScalarStore

logger = logging.getLogger(__name__)

OptionCallback = Callable[["str | None", "str | None"], None]


class OptionSet(DerivedStore[str]):
    """Derived store holding the selected option of a group of members."""

    def __init__(
        self,
        manager: StoreManager,
        name: str,
        callback: OptionCallback,
        categorize: Categorize | None = None,
    ) -> None:
        self.name = name
        self.callback = callback
        self.categorize = categorize
        # option name <-> member definition
        self.members: dict[str, RadioButton] = {}
        self.option_names: dict[str, str] = {}
        super().__init__(KeyedStore(manager) if categorize else ScalarStore(manager))

    def add(self, member: RadioButton, option_name: str) -> None:
        if option_name in self.members:
            raise ValueError(f"Option set {self.name!r} already has an option {option_name!r}")
        self.members[option_name] = member
        self.option_names[member.name] = option_name

    def selected(self, category: str | None = None) -> str | None:
        return self.get(category)

    def select(self, option_name: str, category: str | None = None) -> None:
        if option_name not in self.members:
            raise KeyError(f"Option set {self.name!r} has no option {option_name!r}")
        self.set(category, option_name)

    def deselect(self, category: str | None = None) -> None:
        self.clear(category)

    def set_member(self, member: RadioButton, category: str | None, state: bool) -> None:
        """A member was set true or false directly."""
        option_name = self.option_names[member.name]
        if state:
            self.select(option_name, category)
        elif self.get(category) == option_name:
            self.deselect(category)
        else:
            member._write(category, False)

    def _derive(self, value: str | None, category: str | None) -> None:
        # every member is rewritten and the callback runs even if some fail
        failures = []
        for option_name, member in self.members.items():
            try:
                member._write(category, option_name == value)
            except WatcherError as exc:
                failures.extend(exc.errors)
        try:
            self.callback(value, category)
        except Exception as exc:
            failures.append((self.callback, exc))
        if failures:
            raise WatcherError(self.id, failures) from failures[0][1]

    def __repr__(self) -> str:
        return f"OptionSet({self.name!r}, options={list(self.members)})"


class Controls:
    """Checkbox and radiobutton definitions plus their option sets."""

    def __init__(self, manager: StoreManager) -> None:
        self.manager = manager
        self.defines: dict[str, Checkbox] = {}
        self.option_sets: dict[str, OptionSet] = {}
        self._uid = itertools.count(1)

    # --- Definitions ---

    def new_checkbox(self, name: str | None = None) -> Checkbox:
        return self._define(Checkbox, name)

    def new_radiobutton(self, name: str | None = None) -> RadioButton:
        return self._define(RadioButton, name)

    def _define(self, cls, name):
        if name is None:
            name = f"{cls.type}-{next(self._uid)}"
        if name in self.defines:
            raise ValueError(f"Definition {name!r} already exists")
        define = cls(self, name)
        self.defines[name] = define
        return define

    def get_define(self, name: str) -> Checkbox:
        return self.defines[name]

    # --- Option sets ---

    def new_option_set(
        self,
        name: str,
        callback: OptionCallback,
        categorize: Categorize | None = None,
    ) -> str:
        """Register an option set. Returns its name for add_as_option."""
        if name in self.option_sets:
            raise ValueError(f"Option set {name!r} already exists")
        self.option_sets[name] = OptionSet(self.manager, name, callback, categorize)
        logger.debug("Registered option set %r", name)
        return name

    def add_as_option(
        self,
        member: RadioButton,
        option_set: OptionSet | str,
        option_name: str | None = None,
    ) -> RadioButton:
        """Add a radiobutton to an option set under option_name (default: its name)."""
        if isinstance(option_set, str):
            option_set = self.option_sets[option_set]
        if member.store is not None:
            raise ValueError(f"Definition {member.name!r} already has a store")
        option_name = option_name or member.name
        option_set.add(member, option_name)
        member.add_store(option_set.categorize)
        member.option_set = option_set
        member.option_name = option_name
        return member

    def attach_option_set(self, name: str, parent: ElementLike) -> None:
        """Attach the already drawn children of parent that are options of this set."""
        option_set = self.option_sets.get(name)
        if option_set is None:
            return
        members = {m.name: m for m in option_set.members.values()}
        for child in parent.children:
            member = members.get(child.name)
            if member is not None and child.valid:
                member.post_draw(child)

    # --- Events ---

    def handle_state_changed(self, element: ElementLike) -> bool:
        """Route a checked-state change to its definition. False if there is none."""
        define = self.defines.get(element.name)
        if define is None:
            return False
        define.handle_state_changed(element)
        return True

    def reset_radiobuttons(
        self,
        element: ElementLike | None,
        exclude: str | Iterable[str] | Mapping[str, bool] | None = None,
        recursive: bool | int = False,
    ) -> bool:
        """Set every radiobutton under element to false, excluded ones to true.

        recursive: True walks the whole tree, an int walks that many levels
        below element, False stays on element's direct children.
        """
        if element is None or not element.valid:
            return False
        if isinstance(exclude, Mapping):
            excluded = dict(exclude)
        elif isinstance(exclude, str):
            excluded = {exclude: True}
        elif exclude is not None:
            excluded = {name: True for name in exclude}
        else:
            excluded = {}
        if not isinstance(recursive, bool) and isinstance(recursive, int):
            recursive -= 1

        for child in list(element.children):
            if not child.valid:
                continue
            if child.type == RADIOBUTTON:
                state = bool(excluded.get(child.name, False))
                define = self.defines.get(child.name)
                if define is not None and define.store is not None:
                    define.set_store(define.category_of(child), state)
                else:
                    child.state = state
            elif child.children and _descend(recursive):
                self.reset_radiobuttons(child, excluded, recursive)

        return True


def _descend(recursive: bool | int) -> bool:
    if isinstance(recursive, bool):
        return recursive
    return recursive >= 0
