"""Textual integration for guistore. Opt-in — requires textual.

Bridges Textual toggle widgets (Checkbox, RadioButton) to checkbox
definitions: Changed messages become store writes, and store changes are
pushed back into the widget whose id is the definition's name.
"""

from __future__ import annotations

from contextlib import contextmanager

from textual.css.query import NoMatches
from textual.widgets import Checkbox, RadioButton

from guistore.elements import CHECKBOX, RADIOBUTTON

# Module-owned pause state, keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


class TextualElement:
    """Element view of a Textual widget. The widget id is the element name."""

    __slots__ = ("widget",)

    def __init__(self, widget) -> None:
        self.widget = widget

    @property
    def name(self) -> str:
        return self.widget.id

    @property
    def type(self) -> str:
        if isinstance(self.widget, RadioButton):
            return RADIOBUTTON
        if isinstance(self.widget, Checkbox):
            return CHECKBOX
        return type(self.widget).__name__.lower()

    @property
    def state(self) -> bool:
        return bool(getattr(self.widget, "value", False))

    @state.setter
    def state(self, value: bool) -> None:
        self.widget.value = value

    @property
    def valid(self) -> bool:
        return self.widget.is_attached

    @property
    def player_index(self) -> int:
        return 0

    @property
    def children(self) -> list[TextualElement]:
        return [TextualElement(child) for child in self.widget.children]

    def __eq__(self, other) -> bool:
        return isinstance(other, TextualElement) and other.widget is self.widget

    def __hash__(self) -> int:
        return id(self.widget)


@contextmanager
def pause(app):
    """Stop pushing store values into widgets while the tree is rebuilt."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def handle_changed(controls, event) -> bool:
    """Route a Checkbox.Changed / RadioButton.Changed message to the store.

    Call from the app's on_checkbox_changed / on_radio_button_changed.
    Messages that only echo a value mirror() pushed in are ignored.
    Returns True when a definition handled the change.
    """
    element = TextualElement(event.control)
    define = controls.defines.get(element.name)
    if define is None:
        return False
    if define.store is not None:
        stored = define.get_store(define.category_of(element))
        if bool(stored) == bool(event.value):
            return False
    define.handle_state_changed(element)
    return True


def mirror(app, define):
    """Push the definition's stored value into its widget on every change.

    Skipped while the app is paused or not running; a widget that is not
    mounted (NoMatches) is skipped too. Returns the WatchHandle.
    """

    def _push(value, category):
        if not is_safe(app):
            return
        try:
            widget = app.query_one(f"#{define.name}")
        except NoMatches:
            return
        element = TextualElement(widget)
        if category is not None and define.category_of(element) != category:
            return
        if widget.value != bool(value):
            widget.value = bool(value)

    return define.store.watch(_push)
