"""Textual integration for uivars. Opt-in — requires textual.

Scope paths come from widget ids, so a widget's UI state lives under the
ids of the widgets that contain it. bind() pushes store changes into widgets
with the guards a live widget tree needs.
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

# Pause state keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()

_UNSET = object()


def scope_path(widget) -> tuple[str, ...]:
    """Ids from the outermost ancestor down to widget. Nodes without an id are skipped."""
    return tuple(
        node.id for node in reversed(widget.ancestors_with_self) if node.id is not None
    )


@contextmanager
def pause(app):
    """Suspend bindings during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def bind(app, store, selector, effect, *, fire_immediately=False):
    """Call effect(selector(state)) whenever the selected value changes.

    Skips while the app is paused or not running, ignores NoMatches from
    widget queries, and marshals calls from other threads through
    app.call_from_thread. Returns the store disposer.
    """
    _main = threading.get_ident()
    last = [_UNSET]

    def _on_change(state):
        value = selector(state)
        if last[0] is not _UNSET and value == last[0]:
            return
        last[0] = value
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, value)
        else:
            _safe(value)

    def _safe(value):
        try:
            effect(value)
        except NoMatches:
            pass

    if fire_immediately:
        _on_change(store.state)
    else:
        last[0] = selector(store.state)
    return store.subscribe(_on_change)
