"""Instrumentation injector and data-type annotator.

A checked function's body becomes::

    verify(FUNCTION_ENTRY, <check id>);
    verify(FUNCTION_ARGUMENT, hash<JodyHasher, SimpleHasher>(a));   // check_args only
    ...
    <original body>

The synthesized statements introduce no bindings, so the original body
sees exactly the names it saw before.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from xcheck.annotations import CrossCheckConfig
from xcheck.ast_nodes import (
    FunctionDecl, DataTypeDecl, Parameter, IdentPattern, MetaItem,
    Statement, VerifyCall, IntLiteral, Identifier, HashExpr,
)
from xcheck.config import PassOptions
from xcheck.errors import UnsupportedPatternError, unsupported_pattern
from xcheck.hashing import djb2
from xcheck.printer import format_pattern
from xcheck.tags import Tag

HASH_DERIVE_NAME = "derive"
HASH_TRAIT_NAME = "XCheckHash"


def check_id_for(func: FunctionDecl, config: CrossCheckConfig) -> int:
    """The check identifier reported on entry to ``func``."""
    if config.id is not None:
        return config.id
    if config.name is not None:
        return djb2(config.name)
    return djb2(func.name)


def entry_check(check_id: int, func: FunctionDecl) -> VerifyCall:
    return VerifyCall(
        tag=Tag.FUNCTION_ENTRY,
        value=IntLiteral(value=check_id, location=func.location),
        location=func.location,
    )


def argument_checks(func: FunctionDecl, options: PassOptions) -> list[Statement]:
    """One FUNCTION_ARGUMENT check per parameter, in declaration order."""
    checks: list[Statement] = []
    for param in func.params:
        checks.append(_argument_check(func, param, options))
    return checks


def _argument_check(func: FunctionDecl, param: Parameter, options: PassOptions) -> VerifyCall:
    if not isinstance(param.pattern, IdentPattern):
        raise UnsupportedPatternError(unsupported_pattern(
            func.name, format_pattern(param.pattern), param.location or func.location,
        ))
    loc = param.location or func.location
    return VerifyCall(
        tag=Tag.FUNCTION_ARGUMENT,
        value=HashExpr(
            operand=Identifier(name=param.pattern.name, location=loc),
            hasher=options.hasher,
            aggregator=options.aggregator,
            location=loc,
        ),
        location=loc,
    )


def inject(func: FunctionDecl, config: CrossCheckConfig,
           options: Optional[PassOptions] = None,
           body: Optional[list[Statement]] = None) -> FunctionDecl:
    """Return a checked copy of ``func``.

    ``body`` is the already-walked original body; it defaults to the
    function's own body.  The returned function carries the inertness marker.
    """
    options = options or PassOptions()
    original = func.body if body is None else body
    if original is None:
        raise ValueError(f"function '{func.name}' has no body")

    check_id = check_id_for(func, config)
    new_body: list[Statement] = [entry_check(check_id, func)]
    if options.check_args:
        new_body.extend(argument_checks(func, options))
    new_body.extend(original)
    return replace(func, body=new_body, cross_checked=True)


def has_hash_derive(attributes: list[MetaItem]) -> bool:
    for attr in attributes:
        if attr.name != HASH_DERIVE_NAME or not attr.items:
            continue
        if any(isinstance(item, MetaItem) and item.name == HASH_TRAIT_NAME
               for item in attr.items):
            return True
    return False


def annotate(data_type: DataTypeDecl) -> DataTypeDecl:
    """Append ``@derive(XCheckHash)`` to a struct, enum or union."""
    attributes = list(data_type.attributes)
    if not has_hash_derive(attributes):
        attributes.append(MetaItem(
            name=HASH_DERIVE_NAME,
            items=[MetaItem(name=HASH_TRAIT_NAME, location=data_type.location)],
            location=data_type.location,
        ))
    return replace(data_type, attributes=attributes, cross_checked=True)
