"""Store — a minimal host for the UI reducer.

Holds the canonical state between dispatches, runs the reducer once per
action, and notifies subscribers when the state object changes.

Dispatches inside `with store.transaction()` notify once, when the
outermost transaction exits, so subscribers never see the intermediate
states of a multi-action update.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable

from uivars.actions import Action, Key
from uivars.errors import DispatchError
from uivars.reducer import Reducer, State, get_scope, reduce

logger = logging.getLogger("uivars.store")

INIT = "@@uivars/INIT"

Listener = Callable[[State], None]
Disposer = Callable[[], None]


class Store:
    """Holds UI state and dispatches actions through a reducer."""

    def __init__(self, reducer: Reducer | None = None, state: State | None = None) -> None:
        self._reducer = reducer or reduce
        self._listeners: list[Listener] = []
        self._dispatching = False
        self._batch_depth = 0
        self._batch_start: State | None = None
        self._state = self._reduce(state, Action(INIT))

    @property
    def state(self) -> State:
        return self._state

    def get(self, key: Key, name: str | None = None, default: Any = None) -> Any:
        """Read a whole scope, or one variable of it when name is given."""
        scope = get_scope(self._state, key)
        if name is None:
            return scope
        if scope is None:
            return default
        return scope.get(name, default)

    def dispatch(self, action: Any) -> Any:
        """Run action through the reducer. Reducer errors leave the state as it was."""
        previous = self._state
        self._state = self._reduce(previous, action)
        if self._state is not previous and self._batch_depth == 0:
            self._notify()
        return action

    def subscribe(self, listener: Listener) -> Disposer:
        """Call listener(state) after every state change. Returns a function that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass  # already removed

        return _unsubscribe

    @contextmanager
    def transaction(self):
        """Batch dispatches; subscribers run once, after the outermost block exits.

        Usage:
            with store.transaction():
                store.dispatch(update_ui("form", "name", "Ada"))
                store.dispatch(update_ui("form", "dirty", True))
        """
        if self._batch_depth == 0:
            self._batch_start = self._state
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                changed = self._state is not self._batch_start
                self._batch_start = None
                if changed:
                    self._notify()

    def replace_reducer(self, reducer: Reducer) -> None:
        """Swap the reducer, then re-run INIT so the new one can settle the state."""
        self._reducer = reducer
        self.dispatch(Action(INIT))

    def _reduce(self, state: State | None, action: Any) -> State:
        if self._dispatching:
            raise DispatchError("Reducers may not dispatch actions")
        self._dispatching = True
        try:
            return self._reducer(state, action)
        finally:
            self._dispatching = False

    def _notify(self) -> None:
        state = self._state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Store listener %r failed", listener)
