"""xcheck Instrument pass.

Walks the declaration tree in document order, depth-first, and rewrites
every declaration that an annotation (its own, or its nearest enclosing
scope's) enables:

  - functions get an entry check and optional argument checks,
  - structs, enums and unions get ``@derive(XCheckHash)``,
  - modules and impl blocks hand their policy down to their items.

Declarations that carry the inertness marker are returned untouched, so
running the pass over its own output changes nothing.  The input tree is
never mutated; any error aborts the whole pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from xcheck.annotations import CrossCheckConfig, DEFAULT_CONFIG, resolve_annotation
from xcheck.ast_nodes import (
    Program, Declaration, FunctionDecl, ModuleDecl, ImplBlock,
    Statement, DeclStmt, IfStmt, WhileStmt, ForStmt, BlockStmt,
)
from xcheck.classifier import Action, Decision, classify
from xcheck.config import PassOptions
from xcheck.injector import inject, annotate, check_id_for

logger = logging.getLogger(__name__)


@dataclass
class InstrumentStats:
    functions: int = 0
    data_types: int = 0
    scopes: int = 0
    disabled: int = 0
    skipped: int = 0


class CrossChecker:
    """Rewrites a program so every enabled function reports cross-checks."""

    def __init__(self, options: Optional[PassOptions] = None):
        self.options = options or PassOptions()
        self.stats = InstrumentStats()

    def instrument_program(self, program: Program) -> Program:
        if program.cross_checked:
            logger.debug("%s is already cross-checked", program.filename)
            return program

        policy: Optional[CrossCheckConfig] = None
        if program.annotation is not None:
            policy = resolve_annotation(program.annotation)
        elif self.options.enabled_by_default:
            policy = DEFAULT_CONFIG

        declarations = [self._walk(d, policy) for d in program.declarations]
        logger.info(
            "%s: %d functions, %d data types instrumented (%d disabled, %d already checked)",
            program.filename, self.stats.functions, self.stats.data_types,
            self.stats.disabled, self.stats.skipped,
        )
        return replace(program, declarations=declarations,
                       cross_checked=policy is not None)

    # -------------------------------------------------------------------
    # Declarations
    # -------------------------------------------------------------------

    def _walk(self, decl: Declaration, policy: Optional[CrossCheckConfig]) -> Declaration:
        decision = classify(decl, policy)
        action = decision.action

        if action == Action.SKIP_INERT:
            self.stats.skipped += 1
            return decl

        if action == Action.PASS_THROUGH:
            return self._walk_children(decl, decision.child_policy)

        if action == Action.DISABLE:
            self.stats.disabled += 1
            logger.debug("cross-checks disabled for %s", decl.display_name)
            return replace(self._walk_children(decl, decision.child_policy), cross_checked=True)

        if action == Action.INSTRUMENT_FUNCTION:
            return self._instrument_function(decl, decision)

        if action == Action.ANNOTATE_DATA_TYPE:
            self.stats.data_types += 1
            logger.debug("deriving XCheckHash for %s", decl.display_name)
            return annotate(decl)

        # Action.ENTER_SCOPE
        self.stats.scopes += 1
        return replace(self._walk_children(decl, decision.child_policy), cross_checked=True)

    def _instrument_function(self, func: FunctionDecl, decision: Decision) -> FunctionDecl:
        # Nested declarations are walked on the original body; the checks
        # added by inject() are never visited.
        body = self._walk_statements(func.body or [], decision.child_policy)
        checked = inject(func, decision.config, self.options, body)
        self.stats.functions += 1
        logger.debug(
            "instrumented %s with check id %#010x",
            func.name, check_id_for(func, decision.config),
        )
        return checked

    def _walk_children(self, decl: Declaration,
                       policy: Optional[CrossCheckConfig]) -> Declaration:
        if isinstance(decl, FunctionDecl) and decl.body is not None:
            return replace(decl, body=self._walk_statements(decl.body, policy))
        if isinstance(decl, ModuleDecl):
            return replace(decl, declarations=[self._walk(d, policy) for d in decl.declarations])
        if isinstance(decl, ImplBlock):
            return replace(decl, items=[self._walk(d, policy) for d in decl.items])
        return decl

    # -------------------------------------------------------------------
    # Statements (only to reach nested declarations)
    # -------------------------------------------------------------------

    def _walk_statements(self, stmts: list[Statement],
                         policy: Optional[CrossCheckConfig]) -> list[Statement]:
        return [self._walk_statement(s, policy) for s in stmts]

    def _walk_statement(self, stmt: Statement,
                        policy: Optional[CrossCheckConfig]) -> Statement:
        if isinstance(stmt, DeclStmt):
            return replace(stmt, declaration=self._walk(stmt.declaration, policy))
        if isinstance(stmt, IfStmt):
            return replace(
                stmt,
                then_body=self._walk_statements(stmt.then_body, policy),
                else_body=self._walk_statements(stmt.else_body, policy),
            )
        if isinstance(stmt, (WhileStmt, ForStmt, BlockStmt)):
            return replace(stmt, body=self._walk_statements(stmt.body, policy))
        return stmt


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def instrument(program: Program, options: Optional[PassOptions] = None) -> Program:
    """Instrument a program with cross-check calls. Returns a new tree."""
    return CrossChecker(options).instrument_program(program)
