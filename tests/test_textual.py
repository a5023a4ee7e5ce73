"""Tests for uivars.textual — Textual integration layer."""

import threading

import pytest
from textual.css.query import NoMatches

from uivars import Store, update_ui
from uivars import textual as utx


class _MockApp:
    """Minimal mock matching the Textual App interface utx needs."""

    def __init__(self, *, is_running=True):
        self.is_running = is_running
        self._call_from_thread_log = []

    def call_from_thread(self, fn, *args):
        self._call_from_thread_log.append((fn, args))
        fn(*args)


class _MockNode:
    """Minimal DOM node: an id and a parent chain."""

    def __init__(self, id=None, parent=None):
        self.id = id
        self.parent = parent

    @property
    def ancestors_with_self(self):
        nodes = []
        node = self
        while node is not None:
            nodes.append(node)
            node = node.parent
        return nodes


def _x(state):
    return (state.get("a") or {}).get("x")


class TestScopePath:
    def test_outermost_first(self):
        screen = _MockNode("main")
        form = _MockNode("form", screen)
        field = _MockNode("name", form)
        assert utx.scope_path(field) == ("main", "form", "name")

    def test_skips_nodes_without_id(self):
        app = _MockNode()
        container = _MockNode(None, app)
        field = _MockNode("name", _MockNode("form", container))
        assert utx.scope_path(field) == ("form", "name")


class TestBind:
    def test_skips_when_not_running(self):
        app = _MockApp(is_running=False)
        s = Store()
        effects = []
        utx.bind(app, s, _x, effects.append)
        s.dispatch(update_ui("a", "x", 1))
        assert effects == []

    def test_skips_during_pause(self):
        app = _MockApp()
        s = Store()
        effects = []
        utx.bind(app, s, _x, effects.append)
        with utx.pause(app):
            s.dispatch(update_ui("a", "x", 1))
        assert effects == []

    def test_fires_when_safe(self):
        app = _MockApp()
        s = Store()
        effects = []
        utx.bind(app, s, _x, effects.append)
        s.dispatch(update_ui("a", "x", 1))
        assert effects == [1]

    def test_fires_only_when_selection_changes(self):
        app = _MockApp()
        s = Store()
        effects = []
        utx.bind(app, s, _x, effects.append)
        s.dispatch(update_ui("a", "x", 1))
        s.dispatch(update_ui("a", "y", 5))
        s.dispatch(update_ui("a", "x", 1))
        assert effects == [1]

    def test_fire_immediately(self):
        app = _MockApp()
        s = Store()
        s.dispatch(update_ui("a", "x", 7))
        effects = []
        utx.bind(app, s, _x, effects.append, fire_immediately=True)
        assert effects == [7]

    def test_catches_nomatch(self):
        """NoMatches from widget queries are silently swallowed."""
        app = _MockApp()
        s = Store()

        def _raise_nomatch(v):
            raise NoMatches("StatusFooter")

        # Should not raise
        dispose = utx.bind(app, s, _x, _raise_nomatch)
        s.dispatch(update_ui("a", "x", 1))
        dispose()

    def test_real_errors_reach_the_store(self, caplog):
        """Non-NoMatches exceptions are not swallowed by the bridge."""
        app = _MockApp()
        s = Store()

        def _raise_value_error(v):
            raise ValueError("boom")

        utx.bind(app, s, _x, _raise_value_error)
        s.dispatch(update_ui("a", "x", 1))
        assert "ValueError: boom" in caplog.text

    def test_dispose_stops_binding(self):
        app = _MockApp()
        s = Store()
        effects = []
        dispose = utx.bind(app, s, _x, effects.append)
        s.dispatch(update_ui("a", "x", 1))
        dispose()
        s.dispatch(update_ui("a", "x", 2))
        assert effects == [1]

    def test_thread_marshal(self):
        """Dispatches from a background thread use call_from_thread."""
        app = _MockApp()
        s = Store()
        effects = []
        utx.bind(app, s, _x, effects.append)

        t = threading.Thread(target=lambda: s.dispatch(update_ui("a", "x", 2)))
        t.start()
        t.join()

        assert effects == [2]
        assert len(app._call_from_thread_log) == 1


class TestPause:
    def test_pause_restores_on_exception(self):
        app = _MockApp()
        assert utx.is_safe(app)

        with pytest.raises(RuntimeError):
            with utx.pause(app):
                assert not utx.is_safe(app)
                raise RuntimeError("oops")

        # Restored despite exception
        assert utx.is_safe(app)

    def test_pause_does_not_mutate_app(self):
        app = _MockApp()
        attrs_before = set(vars(app))
        with utx.pause(app):
            attrs_during = set(vars(app))
        assert attrs_before == attrs_during

    def test_multiple_apps_independent(self):
        """Pausing one app does not affect another."""
        app_a = _MockApp()
        app_b = _MockApp()
        with utx.pause(app_a):
            assert not utx.is_safe(app_a)
            assert utx.is_safe(app_b)
