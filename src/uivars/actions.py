"""Action vocabulary — the closed set of actions the UI reducer understands.

Public actions (update, mass update, set default) are safe to dispatch from
application code. Mount and unmount are private: only the binding layer that
owns a scope's lifecycle should construct them.

Payload field names (key, name, value, uiVars, transforms, defaults,
customReducer) are the wire contract with the binding layer.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Mapping, Sequence, TypeVar, Union

V = TypeVar("V")

Key = Union[str, Sequence[str], None]
ScopeReducer = Callable[[Any, Any], Any]

# For updating multiple UI variables at once. Each variable may live in a
# different scope; one action means one store change instead of many.
MASS_UPDATE_UI_STATE = "@@uivars/MASS_UPDATE_UI_STATE"
UPDATE_UI_STATE = "@@uivars/UPDATE_UI_STATE"
SET_DEFAULT_UI_STATE = "@@uivars/SET_DEFAULT_UI_STATE"

# Private, binding layer only.
MOUNT_UI_STATE = "@@uivars/MOUNT_UI_STATE"
UNMOUNT_UI_STATE = "@@uivars/UNMOUNT_UI_STATE"


class Literal(Generic[V]):
    """A replacement value for update_ui()."""

    __slots__ = ("value",)

    def __init__(self, value: V) -> None:
        self.value = value

    def apply(self, current: V | None) -> V:
        return self.value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Literal) and other.value == self.value

    def __repr__(self) -> str:
        return f"Literal({self.value!r})"


class Transform(Generic[V]):
    """An updater for update_ui(): computes the new value from the old one."""

    __slots__ = ("fn",)

    def __init__(self, fn: Callable[[V | None], V]) -> None:
        self.fn = fn

    def apply(self, current: V | None) -> V:
        return self.fn(current)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Transform) and other.fn is self.fn

    def __repr__(self) -> str:
        return f"Transform({getattr(self.fn, '__name__', self.fn)!r})"


def as_update_value(value: Any) -> Literal | Transform:
    """Tag a raw update value: callables become Transforms, anything else a Literal."""
    if isinstance(value, (Literal, Transform)):
        return value
    if callable(value):
        return Transform(value)
    return Literal(value)


class Action:
    """A dispatched action: a kind string plus a payload mapping."""

    __slots__ = ("type", "payload")

    def __init__(self, type: str, payload: Mapping[str, Any] | None = None) -> None:
        self.type = type
        self.payload = payload

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Action):
            return NotImplemented
        return self.type == other.type and self.payload == other.payload

    def __repr__(self) -> str:
        return f"Action({self.type!r}, {self.payload!r})"


def update_ui(key: Key, name: str, value: Any) -> Action:
    """Set one variable in the scope at key.

    value may be a literal or a one-argument updater function:

        update_ui("todo", "count", 3)
        update_ui("todo", "count", lambda n: n + 1)
    """
    return Action(UPDATE_UI_STATE, {
        "key": key,
        "name": name,
        "value": as_update_value(value),
    })


def mass_update_ui(ui_vars: Mapping[str, Sequence[str]], transforms: Mapping[str, Any]) -> Action:
    """Set several variables, possibly in different scopes, in one dispatch.

    ui_vars maps each variable name to the path of the scope that owns it.
    transforms maps variable names to literal replacement values.
    """
    return Action(MASS_UPDATE_UI_STATE, {
        "uiVars": ui_vars,
        "transforms": transforms,
    })


def set_default_ui(key: Key, value: Mapping[str, Any]) -> Action:
    """Reset the scope at key (and what descends from it) to baseline values."""
    return Action(SET_DEFAULT_UI_STATE, {
        "key": key,
        "value": value,
    })


def unmount_ui(key: Key) -> Action:
    """Remove the scope at key and its custom reducer, if any."""
    return Action(UNMOUNT_UI_STATE, {"key": key})


def mount_ui(key: Key, defaults: Mapping[str, Any], custom_reducer: ScopeReducer | None = None) -> Action:
    """Prepare the scope at key when its component is constructed.

    custom_reducer, if given, is registered for the scope and sees every
    action dispatched while the scope stays mounted.
    """
    return Action(MOUNT_UI_STATE, {
        "key": key,
        "defaults": defaults,
        "customReducer": custom_reducer,
    })
