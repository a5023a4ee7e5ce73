"""The UI state reducer.

State is a flat dict keyed by scope key (the scope's path joined with dots),
each value a dict of that scope's UI variables. The reserved key __reducers
holds the custom scope reducers registered at mount time:

    {
        "todo": {"editing": False},
        "todo.item": {"selected": 2},
        "__reducers": {"todo": Registration(("todo",), todo_reducer)},
    }

reduce() never mutates its input. Each dispatch copies only the dicts it
touches, so scopes an action did not change stay the same objects and
consumers can detect changes with `is`.

Dispatch is two steps: the built-in handler for the action kind runs first,
then every registered scope reducer runs, in registration order, on every
action regardless of kind.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, NamedTuple, Sequence

from uivars.actions import (
    MASS_UPDATE_UI_STATE,
    MOUNT_UI_STATE,
    SET_DEFAULT_UI_STATE,
    UNMOUNT_UI_STATE,
    UPDATE_UI_STATE,
    Key,
    ScopeReducer,
    Transform,
    as_update_value,
)
from uivars.errors import MissingScopeError, ReducerResultError, UndefinedVariableError

logger = logging.getLogger("uivars.reducer")

REDUCERS_KEY = "__reducers"

State = Mapping[str, Any]
Reducer = Callable[[State | None, Any], State]


class Registration(NamedTuple):
    """A custom scope reducer and the path of the scope it owns."""

    path: tuple[str, ...]
    handler: ScopeReducer


def default_state() -> dict:
    return {REDUCERS_KEY: {}}


def key_path(key: Key) -> tuple[str, ...]:
    """Normalize a key to path segments. A bare name becomes a one-segment path."""
    if not key:
        return ()
    if isinstance(key, str) or not isinstance(key, Sequence):
        return (key,)
    return tuple(key)


def scope_key(key: Key) -> str:
    """The state key for a scope: its path joined with dots."""
    return ".".join(str(segment) for segment in key_path(key))


def get_scope(state: State | None, key: Key) -> Mapping[str, Any] | None:
    """The scope record at key, or None if no such scope is mounted."""
    if state is None:
        return None
    return state.get(scope_key(key))


def get_ui(state: State | None, key: Key, name: str, default: Any = None) -> Any:
    """Read one UI variable from the scope at key."""
    scope = get_scope(state, key)
    if scope is None:
        return default
    return scope.get(name, default)


def _unpack(action: Any) -> tuple[Any, Mapping[str, Any]]:
    # Hosts may dispatch plain {"type": ..., "payload": ...} dicts.
    if isinstance(action, Mapping):
        return action.get("type"), action.get("payload") or {}
    return getattr(action, "type", None), getattr(action, "payload", None) or {}


# ─── Built-in handlers ───────────────────────────────────────────────────────
# Each takes (state, payload) and returns a new state without mutating state.


def _update(state: State, payload: Mapping[str, Any]) -> State:
    key = scope_key(payload.get("key"))
    name = payload["name"]
    value = as_update_value(payload.get("value"))
    scope = state.get(key)
    if isinstance(value, Transform):
        # An updater needs the current value: no implicit scope creation.
        if scope is None:
            raise MissingScopeError(key)
        new_value = value.apply(scope.get(name))
    else:
        new_value = value.value
    return {**state, key: {**(scope or {}), name: new_value}}


def _mass_update(state: State, payload: Mapping[str, Any]) -> State:
    ui_vars = payload.get("uiVars") or {}
    transforms = payload.get("transforms") or {}
    # Check every variable before writing any, so a bad one rejects the whole action.
    for name in transforms:
        if ui_vars.get(name) is None:
            raise UndefinedVariableError(name)

    new_state = dict(state)
    for name, value in transforms.items():
        key = scope_key(ui_vars[name])
        new_state[key] = {**(new_state.get(key) or {}), name: value}
    return new_state


def _set_default(state: State, payload: Mapping[str, Any]) -> State:
    key = scope_key(payload.get("key"))
    return {**state, key: {**(state.get(key) or {}), **(payload.get("value") or {})}}


def _mount(state: State, payload: Mapping[str, Any], *, replace_registrations: bool) -> State:
    path = key_path(payload.get("key"))
    key = scope_key(path)
    new_state = {**state, key: dict(payload.get("defaults") or {})}

    handler = payload.get("customReducer")
    if handler is not None:
        registration = Registration(path, handler)
        registrations = state.get(REDUCERS_KEY) or {}
        if replace_registrations:
            dropped = [k for k in registrations if k != key]
            if dropped:
                logger.warning(
                    "Mount of %r replaced the reducer table, dropping %d registration(s): %s",
                    key, len(dropped), ", ".join(dropped),
                )
            new_state[REDUCERS_KEY] = {key: registration}
        else:
            new_state[REDUCERS_KEY] = {**registrations, key: registration}

    logger.debug("Mounted %r (custom reducer: %s)", key, handler is not None)
    return new_state


def _unmount(state: State, payload: Mapping[str, Any]) -> State:
    # Parents unmount before their children, so the scope may already be gone.
    key = scope_key(payload.get("key"))
    new_state = dict(state)
    new_state.pop(key, None)
    registrations = state.get(REDUCERS_KEY)
    if registrations and key in registrations:
        new_state[REDUCERS_KEY] = {k: r for k, r in registrations.items() if k != key}
    logger.debug("Unmounted %r", key)
    return new_state


def _run_scope_reducers(state: State, action: Any) -> State:
    """Re-apply every registered scope reducer, in registration order."""
    registrations = state.get(REDUCERS_KEY)
    if not registrations:
        return state
    for registration in registrations.values():
        key = scope_key(registration.path)
        scope = registration.handler(state.get(key), action)
        if scope is None:
            raise ReducerResultError(registration.path)
        if scope is not state.get(key):
            state = {**state, key: scope}
    return state


def make_reducer(*, replace_registrations_on_mount: bool = False) -> Reducer:
    """Build a UI reducer.

    By default mounting a scope with a custom reducer adds its registration to
    the table. With replace_registrations_on_mount=True the table is replaced
    by that single registration instead, deregistering every other scope's
    reducer. Only hosts that rely on that legacy behavior should turn it on.
    """

    def mount(state: State, payload: Mapping[str, Any]) -> State:
        return _mount(state, payload, replace_registrations=replace_registrations_on_mount)

    handlers: dict[str, Callable[[State, Mapping[str, Any]], State]] = {
        UPDATE_UI_STATE: _update,
        MASS_UPDATE_UI_STATE: _mass_update,
        SET_DEFAULT_UI_STATE: _set_default,
        MOUNT_UI_STATE: mount,
        UNMOUNT_UI_STATE: _unmount,
    }

    def reduce(state: State | None, action: Any) -> State:
        if state is None:
            state = default_state()
        kind, payload = _unpack(action)
        handler = handlers.get(kind)
        if handler is not None:
            state = handler(state, payload)
        return _run_scope_reducers(state, action)

    return reduce


reduce = make_reducer()


def reducer_enhancer(custom_reducer: Reducer | None, *, reducer: Reducer = reduce) -> Reducer:
    """Compose the UI reducer with a whole-state reducer of your own.

    The UI reducer always runs first; custom_reducer then sees its output and
    the same action. Use it to handle action kinds the UI reducer ignores.
    """

    def enhanced(state: State | None, action: Any) -> State:
        state = reducer(state, action)
        if callable(custom_reducer):
            state = custom_reducer(state, action)
        return state

    return enhanced
