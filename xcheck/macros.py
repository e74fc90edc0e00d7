"""Expansion of the hand-written ``cross_check_raw`` macro.

    cross_check_raw(value)        =>  verify(UNKNOWN, value as u64);
    cross_check_raw(TAG, value)   =>  verify(TAG, value as u64);

TAG may be spelled with its own name or its runtime constant name
(FUNCTION_CALL_TAG, FUNCTION_ARG_TAG, ...).  The instrument pass never
rewrites these calls; expansion is a separate step run by the driver.
"""

from __future__ import annotations

from dataclasses import replace

from xcheck.ast_nodes import (
    Program, Declaration, FunctionDecl, ModuleDecl, ImplBlock,
    Statement, RawCheckStmt, VerifyCall, DeclStmt, IfStmt, WhileStmt, ForStmt,
    BlockStmt, Identifier, CastExpr, TypeAnnotation,
)
from xcheck.errors import CompileError, macro_error
from xcheck.tags import Tag

RAW_VALUE_TYPE = "u64"


def expand_raw_check(stmt: RawCheckStmt) -> VerifyCall:
    if len(stmt.args) == 1:
        tag = Tag.UNKNOWN
        value = stmt.args[0]
    elif len(stmt.args) == 2:
        tag_expr, value = stmt.args
        if not isinstance(tag_expr, Identifier):
            raise CompileError(macro_error(
                "cross_check_raw tag must be a tag name", tag_expr.location or stmt.location,
            ))
        try:
            tag = Tag.parse(tag_expr.name)
        except KeyError:
            raise CompileError(macro_error(
                f"Unknown verification tag '{tag_expr.name}'",
                tag_expr.location or stmt.location,
            ))
    else:
        raise CompileError(macro_error(
            f"cross_check_raw takes 1 or 2 arguments, got {len(stmt.args)}",
            stmt.location,
        ))
    return VerifyCall(
        tag=tag,
        value=CastExpr(
            expr=value,
            target=TypeAnnotation(name=RAW_VALUE_TYPE),
            location=value.location,
        ),
        location=stmt.location,
    )


def _expand_statements(stmts: list[Statement]) -> list[Statement]:
    out: list[Statement] = []
    for stmt in stmts:
        if isinstance(stmt, RawCheckStmt):
            out.append(expand_raw_check(stmt))
        elif isinstance(stmt, DeclStmt):
            out.append(replace(stmt, declaration=_expand_declaration(stmt.declaration)))
        elif isinstance(stmt, IfStmt):
            out.append(replace(
                stmt,
                then_body=_expand_statements(stmt.then_body),
                else_body=_expand_statements(stmt.else_body),
            ))
        elif isinstance(stmt, (WhileStmt, ForStmt, BlockStmt)):
            out.append(replace(stmt, body=_expand_statements(stmt.body)))
        else:
            out.append(stmt)
    return out


def _expand_declaration(decl: Declaration) -> Declaration:
    if isinstance(decl, FunctionDecl) and decl.body is not None:
        return replace(decl, body=_expand_statements(decl.body))
    if isinstance(decl, ModuleDecl):
        return replace(decl, declarations=[_expand_declaration(d) for d in decl.declarations])
    if isinstance(decl, ImplBlock):
        return replace(decl, items=[_expand_declaration(d) for d in decl.items])
    return decl


def expand_raw_checks(program: Program) -> Program:
    """Rewrite every cross_check_raw call in the tree into a verify call."""
    return replace(program, declarations=[_expand_declaration(d) for d in program.declarations])
