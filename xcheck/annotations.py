"""Configuration resolver for ``@cross_check`` annotations.

Grammar of the annotation arguments (left to right, later keys win)::

    @cross_check                        defaults: enabled, automatic id
    @cross_check(never | disable | no)  explicit disable
    @cross_check(always | enable | yes) explicit enable
    @cross_check(name = "string")       id = djb2(name)
    @cross_check(id = <u32>)            explicit id, highest precedence
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from xcheck.ast_nodes import MetaItem, Expr, IntLiteral, StringLiteral
from xcheck.errors import (
    SourceLocation, ConfigError, unknown_option, id_out_of_range, invalid_value,
)

DISABLE_KEYWORDS = frozenset({"never", "disable", "no"})
ENABLE_KEYWORDS = frozenset({"always", "enable", "yes"})
U32_MAX = 0xFFFFFFFF


@dataclass(frozen=True)
class CrossCheckConfig:
    """Resolved settings of one annotated declaration."""
    enabled: bool = True
    name: Optional[str] = None
    id: Optional[int] = None


DEFAULT_CONFIG = CrossCheckConfig()
DISABLED_CONFIG = CrossCheckConfig(enabled=False)


def _describe(value: Expr) -> str:
    return type(value).__name__


def _literal_text(value: Expr) -> str:
    text = getattr(value, "text", None)
    if text:
        return text
    if hasattr(value, "value"):
        return repr(value.value)
    return _describe(value)


def resolve(args: Sequence[Union[MetaItem, Expr]],
            location: Optional[SourceLocation] = None) -> CrossCheckConfig:
    """Resolve the argument list of one annotation into a configuration.

    Raises ConfigError on the first argument that does not fit the grammar.
    """
    enabled = True
    name: Optional[str] = None
    check_id: Optional[int] = None

    for arg in args:
        if not isinstance(arg, MetaItem):
            # Bare literal, e.g. @cross_check(5)
            raise ConfigError(unknown_option(_literal_text(arg), arg.location or location))
        loc = arg.location or location
        key = arg.name
        if key in DISABLE_KEYWORDS and arg.is_word:
            enabled = False
        elif key in ENABLE_KEYWORDS and arg.is_word:
            enabled = True
        elif key == "name" and arg.is_name_value:
            if not isinstance(arg.value, StringLiteral):
                raise ConfigError(invalid_value("name", "string literal", _describe(arg.value), loc))
            name = arg.value.value
        elif key == "id" and arg.is_name_value:
            if not isinstance(arg.value, IntLiteral):
                raise ConfigError(invalid_value("id", "integer literal", _describe(arg.value), loc))
            value = arg.value.value
            if not 0 <= value <= U32_MAX:
                raise ConfigError(id_out_of_range(value, loc))
            check_id = value
        else:
            raise ConfigError(unknown_option(key, loc))

    return CrossCheckConfig(enabled=enabled, name=name, id=check_id)


def resolve_annotation(meta: MetaItem) -> CrossCheckConfig:
    """Resolve a whole ``@cross_check`` attribute (word or list form)."""
    if meta.is_name_value:
        raise ConfigError(unknown_option(meta.name, meta.location))
    return resolve(meta.items or [], meta.location)
