"""Declaration classifier.

Decides, for one declaration and the policy inherited from its enclosing
scope, what the walker has to do with it.  The nearest enclosing
annotation is the default configuration of every declaration below it
that has none of its own, ``name`` and ``id`` included.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from xcheck.annotations import CrossCheckConfig, resolve_annotation
from xcheck.ast_nodes import (
    Declaration, FunctionDecl, DataTypeDecl, ModuleDecl, ImplBlock,
)
from xcheck.errors import ShapeError, shape_error


class Action(Enum):
    SKIP_INERT = "skip_inert"
    PASS_THROUGH = "pass_through"
    DISABLE = "disable"
    INSTRUMENT_FUNCTION = "instrument_function"
    ANNOTATE_DATA_TYPE = "annotate_data_type"
    ENTER_SCOPE = "enter_scope"


@dataclass(frozen=True)
class Decision:
    action: Action
    config: Optional[CrossCheckConfig] = None
    explicit: bool = False

    @property
    def child_policy(self) -> Optional[CrossCheckConfig]:
        """Policy handed to the declarations nested inside this one."""
        return self.config


def classify(decl: Declaration, policy: Optional[CrossCheckConfig]) -> Decision:
    if decl.cross_checked:
        return Decision(Action.SKIP_INERT)

    if decl.annotation is not None:
        config = resolve_annotation(decl.annotation)
        explicit = True
    elif policy is not None:
        config = policy
        explicit = False
    else:
        return Decision(Action.PASS_THROUGH)

    if not config.enabled:
        return Decision(Action.DISABLE, config, explicit)

    if isinstance(decl, FunctionDecl):
        if decl.body is not None:
            return Decision(Action.INSTRUMENT_FUNCTION, config, explicit)
        if explicit:
            raise ShapeError(shape_error(
                decl.name, "function has no body to instrument",
                decl.annotation.location or decl.location,
            ))
        return Decision(Action.PASS_THROUGH, config, explicit)
    if isinstance(decl, DataTypeDecl):
        return Decision(Action.ANNOTATE_DATA_TYPE, config, explicit)
    if isinstance(decl, (ModuleDecl, ImplBlock)):
        return Decision(Action.ENTER_SCOPE, config, explicit)
    return Decision(Action.PASS_THROUGH, config, explicit)
