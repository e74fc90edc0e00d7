"""xcheck Printer — declaration tree back to source text.

The output re-parses to the same tree (locations aside), including the
``@cross_checked`` marker, so instrumented sources can be fed through the
pass again without being checked twice.
"""

from __future__ import annotations

from typing import Union

from xcheck.ast_nodes import (
    Program, Declaration, FunctionDecl, DataTypeDecl, ModuleDecl, ImplBlock,
    UseDecl, ConstDecl, TypeAlias, MetaItem, Parameter, TypeAnnotation,
    Pattern, IdentPattern, TuplePattern, WildcardPattern,
    Statement, ReturnStmt, LetStmt, AssignStmt, ExprStmt, IfStmt, WhileStmt,
    ForStmt, BreakStmt, ContinueStmt, BlockStmt, DeclStmt, VerifyCall, RawCheckStmt,
    Expr, IntLiteral, FloatLiteral, StringLiteral, BoolLiteral, Identifier,
    BinaryOp, UnaryOp, FunctionCall, FieldAccess, MethodCall, IndexExpr,
    ListLiteral, TupleExpr, ParenExpr, CastExpr, HashExpr,
)

INDENT = "    "
_STRING_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r", "\0": "\\0"}


# ---------------------------------------------------------------------------
# Leaves
# ---------------------------------------------------------------------------

def format_type(t: TypeAnnotation) -> str:
    return str(t)


def format_pattern(p: Pattern) -> str:
    if isinstance(p, IdentPattern):
        return f"mut {p.name}" if p.mutable else p.name
    if isinstance(p, TuplePattern):
        inner = ", ".join(format_pattern(e) for e in p.elements)
        if len(p.elements) == 1:
            inner += ","
        return f"({inner})"
    if isinstance(p, WildcardPattern):
        return "_"
    raise TypeError(f"cannot print pattern {type(p).__name__}")


def format_string(value: str) -> str:
    return '"' + "".join(_STRING_ESCAPES.get(ch, ch) for ch in value) + '"'


def format_expr(e: Expr) -> str:
    if isinstance(e, IntLiteral):
        return e.text if e.text else str(e.value)
    if isinstance(e, FloatLiteral):
        return e.text if e.text else repr(e.value)
    if isinstance(e, StringLiteral):
        return format_string(e.value)
    if isinstance(e, BoolLiteral):
        return "true" if e.value else "false"
    if isinstance(e, Identifier):
        return e.name
    if isinstance(e, BinaryOp):
        return f"{format_expr(e.left)} {e.op} {format_expr(e.right)}"
    if isinstance(e, UnaryOp):
        return f"{e.op}{format_expr(e.operand)}"
    if isinstance(e, FunctionCall):
        return f"{format_expr(e.callee)}({_join(e.args)})"
    if isinstance(e, MethodCall):
        return f"{format_expr(e.obj)}.{e.method_name}({_join(e.args)})"
    if isinstance(e, FieldAccess):
        return f"{format_expr(e.obj)}.{e.field_name}"
    if isinstance(e, IndexExpr):
        return f"{format_expr(e.obj)}[{format_expr(e.index)}]"
    if isinstance(e, ListLiteral):
        return f"[{_join(e.elements)}]"
    if isinstance(e, TupleExpr):
        if len(e.elements) == 1:
            return f"({format_expr(e.elements[0])},)"
        return f"({_join(e.elements)})"
    if isinstance(e, ParenExpr):
        return f"({format_expr(e.inner)})"
    if isinstance(e, CastExpr):
        inner = format_expr(e.expr)
        if isinstance(e.expr, BinaryOp):
            inner = f"({inner})"
        return f"{inner} as {format_type(e.target)}"
    if isinstance(e, HashExpr):
        return f"hash<{e.hasher}, {e.aggregator}>({format_expr(e.operand)})"
    raise TypeError(f"cannot print expression {type(e).__name__}")


def _join(exprs: list[Expr]) -> str:
    return ", ".join(format_expr(a) for a in exprs)


def format_meta(meta: MetaItem) -> str:
    if meta.is_name_value:
        return f"{meta.name} = {format_expr(meta.value)}"
    if meta.is_list:
        return f"{meta.name}({', '.join(_format_nested(i) for i in meta.items)})"
    return meta.name


def _format_nested(item: Union[MetaItem, Expr]) -> str:
    if isinstance(item, MetaItem):
        return format_meta(item)
    return format_expr(item)


def format_param(p: Parameter) -> str:
    text = format_pattern(p.pattern)
    if p.type_annotation is not None:
        text += f": {format_type(p.type_annotation)}"
    return text


# ---------------------------------------------------------------------------
# Declarations and statements
# ---------------------------------------------------------------------------

class SourcePrinter:
    """Emits source text for a declaration tree."""

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._depth = 0

    def _line(self, text: str) -> None:
        self._lines.append(INDENT * self._depth + text if text else "")

    def print_program(self, program: Program) -> str:
        self._lines = []
        self._depth = 0
        if program.annotation is not None:
            self._line(f"@!{format_meta(program.annotation)}")
        for attr in program.attributes:
            self._line(f"@!{format_meta(attr)}")
        if program.cross_checked:
            self._line("@!cross_checked")
        if self._lines and program.declarations:
            self._line("")
        self._declarations(program.declarations)
        return "\n".join(self._lines) + "\n"

    def _declarations(self, decls: list[Declaration]) -> None:
        for i, decl in enumerate(decls):
            if i:
                self._line("")
            self._declaration(decl)

    def _declaration(self, decl: Declaration) -> None:
        if decl.annotation is not None:
            self._line(f"@{format_meta(decl.annotation)}")
        for attr in decl.attributes:
            self._line(f"@{format_meta(attr)}")
        if decl.cross_checked:
            self._line("@cross_checked")
        vis = "pub " if decl.is_pub else ""

        if isinstance(decl, FunctionDecl):
            params = ", ".join(format_param(p) for p in decl.params)
            head = f"{vis}fn {decl.name}({params})"
            if decl.return_type is not None:
                head += f" -> {format_type(decl.return_type)}"
            if decl.body is None:
                self._line(head + ";")
            else:
                self._block(head, decl.body)
        elif isinstance(decl, DataTypeDecl):
            self._data_type(vis, decl)
        elif isinstance(decl, ModuleDecl):
            self._line(f"{vis}mod {decl.name} {{")
            self._depth += 1
            self._declarations(decl.declarations)
            self._depth -= 1
            self._line("}")
        elif isinstance(decl, ImplBlock):
            self._line(f"{vis}impl {format_type(decl.target)} {{")
            self._depth += 1
            self._declarations(decl.items)
            self._depth -= 1
            self._line("}")
        elif isinstance(decl, UseDecl):
            alias = f" as {decl.alias}" if decl.alias else ""
            self._line(f"{vis}use {'::'.join(decl.path)}{alias};")
        elif isinstance(decl, ConstDecl):
            ty = f": {format_type(decl.type_annotation)}" if decl.type_annotation else ""
            self._line(f"{vis}const {decl.name}{ty} = {format_expr(decl.value)};")
        elif isinstance(decl, TypeAlias):
            self._line(f"{vis}type {decl.name} = {format_type(decl.target)};")
        else:
            raise TypeError(f"cannot print declaration {type(decl).__name__}")

    def _data_type(self, vis: str, decl: DataTypeDecl) -> None:
        head = f"{vis}{decl.kind} {decl.name}"
        if decl.kind == "enum":
            self._line(head + " {")
            self._depth += 1
            for v in decl.variants:
                if v.fields:
                    self._line(f"{v.name}({', '.join(format_type(f) for f in v.fields)}),")
                else:
                    self._line(f"{v.name},")
            self._depth -= 1
            self._line("}")
        elif not decl.fields:
            self._line(head + ";")
        else:
            self._line(head + " {")
            self._depth += 1
            for f in decl.fields:
                self._line(f"{f.name}: {format_type(f.type_annotation)},")
            self._depth -= 1
            self._line("}")

    def _block(self, head: str, body: list[Statement]) -> None:
        self._line(f"{head} {{" if head else "{")
        self._body(body)
        self._line("}")

    def _statement(self, stmt: Statement) -> None:
        if isinstance(stmt, VerifyCall):
            self._line(f"verify({stmt.tag.name}, {format_expr(stmt.value)});")
        elif isinstance(stmt, RawCheckStmt):
            self._line(f"cross_check_raw({_join(stmt.args)});")
        elif isinstance(stmt, ReturnStmt):
            if stmt.value is None:
                self._line("return;")
            else:
                self._line(f"return {format_expr(stmt.value)};")
        elif isinstance(stmt, LetStmt):
            text = f"let {format_pattern(stmt.pattern)}"
            if stmt.type_annotation is not None:
                text += f": {format_type(stmt.type_annotation)}"
            if stmt.value is not None:
                text += f" = {format_expr(stmt.value)}"
            self._line(text + ";")
        elif isinstance(stmt, AssignStmt):
            self._line(f"{format_expr(stmt.target)} = {format_expr(stmt.value)};")
        elif isinstance(stmt, ExprStmt):
            self._line(f"{format_expr(stmt.expr)};")
        elif isinstance(stmt, IfStmt):
            self._if(stmt, "")
        elif isinstance(stmt, WhileStmt):
            self._block(f"while {format_expr(stmt.condition)}", stmt.body)
        elif isinstance(stmt, ForStmt):
            self._block(
                f"for {format_pattern(stmt.pattern)} in {format_expr(stmt.iterable)}",
                stmt.body,
            )
        elif isinstance(stmt, BreakStmt):
            self._line("break;")
        elif isinstance(stmt, ContinueStmt):
            self._line("continue;")
        elif isinstance(stmt, BlockStmt):
            self._block("", stmt.body)
        elif isinstance(stmt, DeclStmt):
            self._declaration(stmt.declaration)
        else:
            raise TypeError(f"cannot print statement {type(stmt).__name__}")

    def _body(self, stmts: list[Statement]) -> None:
        self._depth += 1
        for s in stmts:
            self._statement(s)
        self._depth -= 1

    def _if(self, stmt: IfStmt, prefix: str) -> None:
        self._line(f"{prefix}if {format_expr(stmt.condition)} {{")
        self._body(stmt.then_body)
        else_body = stmt.else_body
        if not else_body:
            self._line("}")
        elif len(else_body) == 1 and isinstance(else_body[0], IfStmt):
            self._if(else_body[0], "} else ")
        else:
            self._line("} else {")
            self._body(else_body)
            self._line("}")


def print_program(program: Program) -> str:
    """Render a program as source text."""
    return SourcePrinter().print_program(program)
