"""xcheck AST node definitions.

Top-level constructs: fn, struct, enum, union, mod, impl, use, const, type.
Every declaration carries its own ``@cross_check`` annotation (if any), its
other attributes, and the ``cross_checked`` inertness marker.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from xcheck.errors import SourceLocation
from xcheck.tags import Tag


# ---------------------------------------------------------------------------
# Type Annotations (in source)
# ---------------------------------------------------------------------------

@dataclass
class TypeAnnotation:
    name: str
    generic_args: list[TypeAnnotation] = field(default_factory=list)
    location: Optional[SourceLocation] = None

    def __str__(self) -> str:
        if self.generic_args:
            args = ", ".join(str(a) for a in self.generic_args)
            return f"{self.name}<{args}>"
        return self.name


@dataclass
class TupleType(TypeAnnotation):
    """(int, float)"""
    name: str = "()"

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.generic_args)
        if len(self.generic_args) == 1:
            args += ","
        return f"({args})"


# ---------------------------------------------------------------------------
# Patterns (parameter and let bindings)
# ---------------------------------------------------------------------------

@dataclass
class Pattern:
    """Base class for patterns."""
    location: Optional[SourceLocation] = None


@dataclass
class WildcardPattern(Pattern):
    """The _ pattern — binds nothing."""
    pass


@dataclass
class IdentPattern(Pattern):
    """Binds the whole value to a name."""
    name: str = ""
    mutable: bool = False


@dataclass
class TuplePattern(Pattern):
    """Destructures a tuple:  (a, (b, _))"""
    elements: list[Pattern] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

@dataclass
class Expr:
    location: Optional[SourceLocation] = None


@dataclass
class IntLiteral(Expr):
    value: int = 0
    text: Optional[str] = None  # original spelling, e.g. 0x1234


@dataclass
class FloatLiteral(Expr):
    value: float = 0.0
    text: Optional[str] = None


@dataclass
class StringLiteral(Expr):
    value: str = ""


@dataclass
class BoolLiteral(Expr):
    value: bool = False


@dataclass
class Identifier(Expr):
    """A name or a path such as ``std::mem::swap``."""
    name: str = ""


@dataclass
class BinaryOp(Expr):
    op: str = ""
    left: Expr = field(default_factory=Expr)
    right: Expr = field(default_factory=Expr)


@dataclass
class UnaryOp(Expr):
    op: str = ""
    operand: Expr = field(default_factory=Expr)


@dataclass
class FunctionCall(Expr):
    callee: Expr = field(default_factory=Expr)
    args: list[Expr] = field(default_factory=list)


@dataclass
class FieldAccess(Expr):
    obj: Expr = field(default_factory=Expr)
    field_name: str = ""


@dataclass
class MethodCall(Expr):
    obj: Expr = field(default_factory=Expr)
    method_name: str = ""
    args: list[Expr] = field(default_factory=list)


@dataclass
class IndexExpr(Expr):
    obj: Expr = field(default_factory=Expr)
    index: Expr = field(default_factory=Expr)


@dataclass
class ListLiteral(Expr):
    elements: list[Expr] = field(default_factory=list)


@dataclass
class TupleExpr(Expr):
    elements: list[Expr] = field(default_factory=list)


@dataclass
class ParenExpr(Expr):
    inner: Expr = field(default_factory=Expr)


@dataclass
class CastExpr(Expr):
    """expr as u64"""
    expr: Expr = field(default_factory=Expr)
    target: TypeAnnotation = field(default_factory=lambda: TypeAnnotation(name="u64"))


@dataclass
class HashExpr(Expr):
    """Structural hash of a value:  hash<JodyHasher, SimpleHasher>(x)"""
    operand: Expr = field(default_factory=Expr)
    hasher: str = "JodyHasher"
    aggregator: str = "SimpleHasher"


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

@dataclass
class Statement:
    location: Optional[SourceLocation] = None


@dataclass
class ReturnStmt(Statement):
    value: Optional[Expr] = None


@dataclass
class LetStmt(Statement):
    pattern: Pattern = field(default_factory=WildcardPattern)
    type_annotation: Optional[TypeAnnotation] = None
    value: Optional[Expr] = None


@dataclass
class AssignStmt(Statement):
    target: Expr = field(default_factory=Expr)
    value: Expr = field(default_factory=Expr)


@dataclass
class ExprStmt(Statement):
    expr: Expr = field(default_factory=Expr)


@dataclass
class IfStmt(Statement):
    condition: Expr = field(default_factory=Expr)
    then_body: list[Statement] = field(default_factory=list)
    else_body: list[Statement] = field(default_factory=list)


@dataclass
class WhileStmt(Statement):
    condition: Expr = field(default_factory=Expr)
    body: list[Statement] = field(default_factory=list)


@dataclass
class ForStmt(Statement):
    """for x in collection { ... }"""
    pattern: Pattern = field(default_factory=WildcardPattern)
    iterable: Expr = field(default_factory=Expr)
    body: list[Statement] = field(default_factory=list)


@dataclass
class BreakStmt(Statement):
    pass


@dataclass
class ContinueStmt(Statement):
    pass


@dataclass
class BlockStmt(Statement):
    body: list[Statement] = field(default_factory=list)


@dataclass
class DeclStmt(Statement):
    """A declaration nested inside a function body."""
    declaration: Declaration = field(default_factory=lambda: Declaration())


@dataclass
class VerifyCall(Statement):
    """verify(TAG, value) — reports one (tag, value) pair to the runtime."""
    tag: Tag = Tag.UNKNOWN
    value: Expr = field(default_factory=Expr)


@dataclass
class RawCheckStmt(Statement):
    """cross_check_raw(value)  |  cross_check_raw(TAG, value)"""
    args: list[Expr] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------

@dataclass
class MetaItem:
    """One attribute or one attribute argument.

    ``@inline`` is a word, ``@derive(Debug, Clone)`` is a list and
    ``name = "x"`` is a name/value pair.  List entries may also be bare
    literals.
    """
    name: str = ""
    items: Optional[list[Union[MetaItem, Expr]]] = None
    value: Optional[Expr] = None
    location: Optional[SourceLocation] = None

    @property
    def is_word(self) -> bool:
        return self.items is None and self.value is None

    @property
    def is_list(self) -> bool:
        return self.items is not None

    @property
    def is_name_value(self) -> bool:
        return self.value is not None


# ---------------------------------------------------------------------------
# Parameters and fields
# ---------------------------------------------------------------------------

@dataclass
class Parameter:
    pattern: Pattern
    type_annotation: Optional[TypeAnnotation] = None
    location: Optional[SourceLocation] = None


@dataclass
class FieldDef:
    name: str
    type_annotation: TypeAnnotation
    location: Optional[SourceLocation] = None


@dataclass
class VariantDef:
    """A single enum variant:  Circle(float)  or  Empty"""
    name: str = ""
    fields: list[TypeAnnotation] = field(default_factory=list)
    location: Optional[SourceLocation] = None


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

@dataclass
class Declaration:
    location: Optional[SourceLocation] = None
    annotation: Optional[MetaItem] = None
    attributes: list[MetaItem] = field(default_factory=list)
    cross_checked: bool = False
    is_pub: bool = False

    @property
    def display_name(self) -> str:
        return getattr(self, "name", "") or type(self).__name__


@dataclass
class FunctionDecl(Declaration):
    name: str = ""
    params: list[Parameter] = field(default_factory=list)
    return_type: Optional[TypeAnnotation] = None
    body: Optional[list[Statement]] = None  # None for foreign declarations


@dataclass
class DataTypeDecl(Declaration):
    """struct / enum / union definitions."""
    kind: str = "struct"
    name: str = ""
    fields: list[FieldDef] = field(default_factory=list)
    variants: list[VariantDef] = field(default_factory=list)


@dataclass
class ModuleDecl(Declaration):
    """mod name { ... }"""
    name: str = ""
    declarations: list[Declaration] = field(default_factory=list)


@dataclass
class ImplBlock(Declaration):
    """impl Point { fn norm(self) -> float { ... } }"""
    target: TypeAnnotation = field(default_factory=lambda: TypeAnnotation(name=""))
    items: list[Declaration] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return f"impl {self.target}"


@dataclass
class UseDecl(Declaration):
    """use std::collections::HashMap"""
    path: list[str] = field(default_factory=list)
    alias: Optional[str] = None

    @property
    def display_name(self) -> str:
        return "use " + "::".join(self.path)


@dataclass
class ConstDecl(Declaration):
    name: str = ""
    type_annotation: Optional[TypeAnnotation] = None
    value: Expr = field(default_factory=Expr)


@dataclass
class TypeAlias(Declaration):
    """type Name = int"""
    name: str = ""
    target: TypeAnnotation = field(default_factory=lambda: TypeAnnotation(name="()"))


# ---------------------------------------------------------------------------
# Program (root node)
# ---------------------------------------------------------------------------

@dataclass
class Program:
    declarations: list[Declaration] = field(default_factory=list)
    filename: str = "<stdin>"
    annotation: Optional[MetaItem] = None  # @!cross_check(...)
    attributes: list[MetaItem] = field(default_factory=list)
    cross_checked: bool = False
