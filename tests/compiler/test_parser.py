"""Front end tests — XC-020 through XC-025.

Lexer, parser and printer: the pass only ever sees what these produce,
and its output only survives a rebuild if the printer re-parses cleanly.
"""

import pytest

from xcheck.ast_nodes import (
    FunctionDecl, DataTypeDecl, ModuleDecl, ImplBlock, UseDecl, ConstDecl, TypeAlias,
    IdentPattern, TuplePattern, WildcardPattern, ReturnStmt, BinaryOp, DeclStmt,
    VerifyCall, RawCheckStmt, HashExpr, CastExpr, IntLiteral, TupleExpr, ParenExpr,
    IfStmt,
)
from xcheck.errors import CompileError, ErrorKind
from xcheck.lexer import tokenize, TokenType, parse_int_literal
from xcheck.parser import parse
from xcheck.printer import print_program
from xcheck.tags import Tag


SAMPLE = """
@!cross_check
@!feature(xcheck)

use std::collections::HashMap as Map;

const LIMIT: int = 0x10;

type Pair = (int, int);

@cross_check(name = "adder")
@inline
pub fn add(a: int, b: int) -> int {
    return a + b;
}

fn external(x: int);

@derive(Debug, Clone)
struct Point {
    x: int,
    y: int,
}

enum Shape {
    Circle(float),
    Rect(float, float),
    Empty,
}

union Bits {
    i: int,
    f: float,
}

mod geometry {
    fn area(s: Shape) -> float {
        let mut total = 0.0;
        for (w, h) in sides(s) {
            total = total + w * h;
        }
        if total < 0.0 {
            return -total;
        } else if total == 0.0 {
            return 0.0;
        } else {
            fn helper(v: float) -> float {
                return v;
            }
            return helper(total);
        }
    }
}

impl Point {
    fn norm(self) -> float {
        let (dx, _) = (self.x, self.y);
        while false {
            break;
        }
        cross_check_raw(FUNCTION_ARG_TAG, dx);
        return (dx * dx + self.y * self.y) as float;
    }
}
"""


class TestXC020:
    """XC-020: tokens and literals."""

    def test_annotation_tokens(self):
        types = [t.type for t in tokenize("@cross_check @!cross_check")]
        assert types == [TokenType.AT, TokenType.IDENT, TokenType.AT_BANG,
                         TokenType.IDENT, TokenType.EOF]

    @pytest.mark.parametrize("text, value", [
        ("1234", 1234),
        ("1_000", 1000),
        ("0x1F", 31),
        ("0o17", 15),
        ("0b1010", 10),
    ])
    def test_int_literals(self, text, value):
        assert parse_int_literal(text) == value

    def test_locations(self):
        tokens = tokenize("fn\n  add", filename="lib.xc")
        assert (tokens[1].location.line, tokens[1].location.column) == (2, 3)
        assert tokens[1].location.file == "lib.xc"

    def test_unterminated_string(self):
        with pytest.raises(CompileError) as exc:
            tokenize('"abc')
        assert exc.value.kind == ErrorKind.SYNTAX_ERROR

    def test_invalid_int_literal(self):
        with pytest.raises(CompileError):
            parse("const X: int = 0xZZ;")


class TestXC021:
    """XC-021: declarations and attributes."""

    def test_sample_parses(self):
        program = parse(SAMPLE)
        kinds = [type(d) for d in program.declarations]
        assert kinds == [UseDecl, ConstDecl, TypeAlias, FunctionDecl, FunctionDecl,
                         DataTypeDecl, DataTypeDecl, DataTypeDecl, ModuleDecl, ImplBlock]

    def test_inner_annotation(self):
        program = parse(SAMPLE)
        assert program.annotation is not None
        assert program.annotation.is_word
        assert [a.name for a in program.attributes] == ["feature"]

    def test_annotation_split_from_attributes(self):
        add = parse(SAMPLE).declarations[3]
        assert add.annotation.name == "cross_check"
        assert [a.name for a in add.attributes] == ["inline"]
        assert add.is_pub

    def test_marker_is_parsed_into_field(self):
        func = parse("@cross_checked\nfn f() { }").declarations[0]
        assert func.cross_checked is True
        assert func.attributes == []

    def test_bodyless_function(self):
        external = parse(SAMPLE).declarations[4]
        assert external.body is None

    def test_data_type_kinds(self):
        decls = parse(SAMPLE).declarations
        assert [(d.kind, d.name) for d in decls[5:8]] == [
            ("struct", "Point"), ("enum", "Shape"), ("union", "Bits"),
        ]
        assert [v.name for v in decls[6].variants] == ["Circle", "Rect", "Empty"]

    def test_duplicate_annotation_rejected(self):
        with pytest.raises(CompileError):
            parse("@cross_check\n@cross_check(never)\nfn f() { }")

    def test_inner_attribute_after_items_rejected(self):
        with pytest.raises(CompileError):
            parse("fn f() { }\n@!cross_check\nfn g() { }")


class TestXC022:
    """XC-022: parameters and patterns."""

    def test_patterns(self):
        func = parse("fn f(a: int, mut b: int, (c, _): (int, int), _: int) { }").declarations[0]
        patterns = [p.pattern for p in func.params]
        assert isinstance(patterns[0], IdentPattern) and patterns[0].name == "a"
        assert isinstance(patterns[1], IdentPattern) and patterns[1].mutable
        assert isinstance(patterns[2], TuplePattern)
        assert isinstance(patterns[2].elements[1], WildcardPattern)
        assert isinstance(patterns[3], WildcardPattern)

    def test_self_parameter(self):
        impl = parse("impl P { fn get(self) -> int { return 1; } }").declarations[0]
        param = impl.items[0].params[0]
        assert param.pattern.name == "self"
        assert param.type_annotation is None


class TestXC023:
    """XC-023: statements and expressions."""

    def test_return_expression(self):
        func = parse("fn add(a: int, b: int) -> int { return a + b; }").declarations[0]
        stmt = func.body[0]
        assert isinstance(stmt, ReturnStmt)
        assert isinstance(stmt.value, BinaryOp) and stmt.value.op == "+"

    def test_nested_function_is_decl_stmt(self):
        module = parse(SAMPLE).declarations[8]
        area = module.declarations[0]
        outer_if = area.body[2]
        assert isinstance(outer_if, IfStmt)
        else_if = outer_if.else_body[0]
        assert isinstance(else_if, IfStmt)
        assert isinstance(else_if.else_body[0], DeclStmt)

    def test_verify_call(self):
        func = parse("fn f(a: int) { verify(FUNCTION_ENTRY, 7); verify(FUNCTION_ARG_TAG, hash<JodyHasher, SimpleHasher>(a)); }").declarations[0]
        entry, arg = func.body
        assert isinstance(entry, VerifyCall) and entry.tag == Tag.FUNCTION_ENTRY
        assert isinstance(arg, VerifyCall) and arg.tag == Tag.FUNCTION_ARGUMENT
        assert isinstance(arg.value, HashExpr) and arg.value.hasher == "JodyHasher"

    def test_unknown_verify_tag(self):
        with pytest.raises(CompileError):
            parse("fn f() { verify(NOT_A_TAG, 1); }")

    def test_raw_check(self):
        impl = parse(SAMPLE).declarations[9]
        raw = impl.items[0].body[2]
        assert isinstance(raw, RawCheckStmt)
        assert len(raw.args) == 2

    def test_cast_and_parens(self):
        impl = parse(SAMPLE).declarations[9]
        ret = impl.items[0].body[-1]
        assert isinstance(ret.value, CastExpr)
        assert isinstance(ret.value.expr, ParenExpr)

    def test_tuples(self):
        func = parse("fn f() { let t = (1,); let u = (1, 2); let p = (1); }").declarations[0]
        assert isinstance(func.body[0].value, TupleExpr) and len(func.body[0].value.elements) == 1
        assert isinstance(func.body[1].value, TupleExpr)
        assert isinstance(func.body[2].value, ParenExpr)

    def test_hash_identifier_still_usable(self):
        func = parse("fn f(hash: int) -> bool { return hash < 3; }").declarations[0]
        assert isinstance(func.body[0].value, BinaryOp)

    def test_missing_semicolon(self):
        with pytest.raises(CompileError) as exc:
            parse("fn f() { return 1 }")
        assert exc.value.errors[0].location.line == 1


class TestXC024:
    """XC-024: printer output re-parses to the same source."""

    def test_print_is_stable(self):
        once = print_program(parse(SAMPLE))
        twice = print_program(parse(once))
        assert once == twice

    def test_literal_spelling_preserved(self):
        text = print_program(parse("const X: int = 0x10;"))
        assert "0x10" in text

    def test_marker_printed(self):
        text = print_program(parse("@cross_checked\nfn f() { }"))
        assert "@cross_checked\nfn f() {\n}" in text

    def test_string_escapes(self):
        text = print_program(parse('@cross_check(name = "a\\"b")\nfn f() { }'))
        assert '@cross_check(name = "a\\"b")' in text
        assert parse(text).declarations[0].annotation.items[0].value.value == 'a"b'


class TestXC025:
    """XC-025: integer literals keep their value."""

    def test_int_literal_value_and_text(self):
        const = parse("const X: int = 1_000;").declarations[0]
        assert isinstance(const.value, IntLiteral)
        assert const.value.value == 1000
        assert const.value.text == "1_000"
