"""uivars: keyed, hierarchical UI-local state for reducer-driven apps."""

from importlib.metadata import version as _version

__version__ = _version("uivars")

from uivars.actions import (
    Action,
    Literal,
    Transform,
    MASS_UPDATE_UI_STATE,
    UPDATE_UI_STATE,
    SET_DEFAULT_UI_STATE,
    update_ui,
    mass_update_ui,
    set_default_ui,
)
from uivars.errors import (
    UIStateError,
    UndefinedVariableError,
    ReducerResultError,
    MissingScopeError,
    DispatchError,
)
from uivars.reducer import (
    Registration,
    default_state,
    get_scope,
    get_ui,
    make_reducer,
    reduce,
    reducer_enhancer,
    scope_key,
)
from uivars.store import Store
# mount_ui/unmount_ui are binding-layer only: import them from uivars.actions
# textual NOT auto-imported — opt-in only

__all__ = [
    "Action",
    "Literal",
    "Transform",
    "MASS_UPDATE_UI_STATE",
    "UPDATE_UI_STATE",
    "SET_DEFAULT_UI_STATE",
    "update_ui",
    "mass_update_ui",
    "set_default_ui",
    "UIStateError",
    "UndefinedVariableError",
    "ReducerResultError",
    "MissingScopeError",
    "DispatchError",
    "Registration",
    "default_state",
    "get_scope",
    "get_ui",
    "make_reducer",
    "reduce",
    "reducer_enhancer",
    "scope_key",
    "Store",
]
