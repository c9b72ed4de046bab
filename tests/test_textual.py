"""Tests for guistore.textual — Textual integration layer."""

from types import SimpleNamespace

import pytest
from textual.css.query import NoMatches

from guistore import Controls, StoreManager
from guistore import textual as gtx


class _MockWidget:
    """Minimal stand-in for a Textual toggle widget."""

    def __init__(self, id, value=False, children=()):
        self.id = id
        self.value = value
        self.children = list(children)
        self.is_attached = True


class _MockApp:
    """Minimal mock matching the Textual App interface gtx needs."""

    def __init__(self, *widgets, is_running=True):
        self.is_running = is_running
        self._widgets = {w.id: w for w in widgets}

    def query_one(self, selector):
        try:
            return self._widgets[selector.lstrip("#")]
        except KeyError:
            raise NoMatches(selector)


def _changed(widget):
    return SimpleNamespace(control=widget, value=widget.value)


class TestTextualElement:
    def test_wraps_widget(self):
        inner = _MockWidget("inner", value=True)
        outer = _MockWidget("outer", children=[inner])
        element = gtx.TextualElement(outer)
        assert element.name == "outer"
        assert element.state is False
        assert element.valid
        assert element.children == [gtx.TextualElement(inner)]
        assert element.children[0].state is True

    def test_state_setter(self):
        widget = _MockWidget("w")
        gtx.TextualElement(widget).state = True
        assert widget.value is True


class TestHandleChanged:
    def test_writes_store(self):
        controls = Controls(StoreManager())
        checkbox = controls.new_checkbox("dark-mode").add_store()
        widget = _MockWidget("dark-mode", value=True)
        assert gtx.handle_changed(controls, _changed(widget))
        assert checkbox.get_store() is True

    def test_ignores_echo(self):
        controls = Controls(StoreManager())
        checkbox = controls.new_checkbox("dark-mode").add_store()
        checkbox.set_store(None, True)
        widget = _MockWidget("dark-mode", value=True)
        assert gtx.handle_changed(controls, _changed(widget)) is False

    def test_unknown_widget(self):
        controls = Controls(StoreManager())
        assert gtx.handle_changed(controls, _changed(_MockWidget("other"))) is False

    def test_option_set(self):
        controls = Controls(StoreManager())
        log = []
        name = controls.new_option_set("size", lambda value, category: log.append(value))
        controls.new_radiobutton("small").add_as_option(name, "Small")
        controls.new_radiobutton("large").add_as_option(name, "Large")
        gtx.handle_changed(controls, _changed(_MockWidget("large", value=True)))
        assert controls.option_sets[name].selected() == "Large"
        assert log == ["Large"]


class TestMirror:
    def test_pushes_value(self):
        controls = Controls(StoreManager())
        checkbox = controls.new_checkbox("dark-mode").add_store()
        widget = _MockWidget("dark-mode")
        gtx.mirror(_MockApp(widget), checkbox)
        checkbox.set_store(None, True)
        assert widget.value is True
        checkbox.store.clear()
        assert widget.value is False

    def test_skips_when_not_running(self):
        controls = Controls(StoreManager())
        checkbox = controls.new_checkbox("dark-mode").add_store()
        widget = _MockWidget("dark-mode")
        gtx.mirror(_MockApp(widget, is_running=False), checkbox)
        checkbox.set_store(None, True)
        assert widget.value is False

    def test_skips_during_pause(self):
        controls = Controls(StoreManager())
        checkbox = controls.new_checkbox("dark-mode").add_store()
        widget = _MockWidget("dark-mode")
        app = _MockApp(widget)
        gtx.mirror(app, checkbox)
        with gtx.pause(app):
            checkbox.set_store(None, True)
        assert widget.value is False

    def test_missing_widget(self):
        """NoMatches from the widget query is swallowed."""
        controls = Controls(StoreManager())
        checkbox = controls.new_checkbox("dark-mode").add_store()
        gtx.mirror(_MockApp(), checkbox)
        checkbox.set_store(None, True)  # should not raise
        assert checkbox.get_store() is True

    def test_dispose(self):
        controls = Controls(StoreManager())
        checkbox = controls.new_checkbox("dark-mode").add_store()
        widget = _MockWidget("dark-mode")
        handle = gtx.mirror(_MockApp(widget), checkbox)
        handle.dispose()
        checkbox.set_store(None, True)
        assert widget.value is False


class TestPause:
    def test_pause_restores_on_exception(self):
        app = _MockApp()
        assert gtx.is_safe(app)

        with pytest.raises(RuntimeError):
            with gtx.pause(app):
                assert not gtx.is_safe(app)
                raise RuntimeError("oops")

        assert gtx.is_safe(app)

    def test_multiple_apps_independent(self):
        app_a = _MockApp()
        app_b = _MockApp()
        with gtx.pause(app_a):
            assert not gtx.is_safe(app_a)
            assert gtx.is_safe(app_b)
