"""Exception hierarchy for uivars.

Every error here is a programmer error surfaced synchronously to whoever
dispatched the action. The reducer never recovers from them: the dispatch
simply did not apply.
"""

from __future__ import annotations


class UIStateError(Exception):
    """Base exception for all uivars errors."""


class UndefinedVariableError(UIStateError):
    """A mass update named a variable missing from its scope map."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(
            f"Couldn't find variable {identifier} within your component's UI state "
            f"context. Define {identifier} before updating it"
        )


class ReducerResultError(UIStateError):
    """A custom scope reducer returned None instead of a scope record."""

    def __init__(self, path: tuple[str, ...]) -> None:
        self.path = path
        super().__init__(
            f"Your custom UI reducer at path {'.'.join(path)} must return some state"
        )


class MissingScopeError(UIStateError, KeyError):
    """An updater function targeted a scope that was never mounted."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"No UI state mounted at {key!r}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class DispatchError(UIStateError):
    """Store.dispatch() was re-entered while a reducer was running."""
