"""xcheck Parser — recursive-descent parser.

Parses a token stream into the declaration tree the instrumentation pass
rewrites. Attributes are split on the way in: the ``@cross_check``
annotation and the ``@cross_checked`` marker get their own fields, every
other attribute is kept in order on ``Declaration.attributes``.
"""

from __future__ import annotations

from typing import Optional, Union

from xcheck.lexer import Token, TokenType, KEYWORDS, tokenize, parse_int_literal
from xcheck.ast_nodes import (
    Program, Declaration, FunctionDecl, DataTypeDecl, ModuleDecl, ImplBlock,
    UseDecl, ConstDecl, TypeAlias,
    MetaItem, Parameter, FieldDef, VariantDef, TypeAnnotation, TupleType,
    Pattern, IdentPattern, TuplePattern, WildcardPattern,
    Statement, ReturnStmt, LetStmt, AssignStmt, ExprStmt, IfStmt, WhileStmt,
    ForStmt, BreakStmt, ContinueStmt, BlockStmt, DeclStmt, VerifyCall, RawCheckStmt,
    Expr, IntLiteral, FloatLiteral, StringLiteral, BoolLiteral, Identifier,
    BinaryOp, UnaryOp, FunctionCall, FieldAccess, MethodCall, IndexExpr,
    ListLiteral, TupleExpr, ParenExpr, CastExpr, HashExpr,
)
from xcheck.errors import SourceLocation, syntax_error, CompileError
from xcheck.tags import Tag

ANNOTATION_NAME = "cross_check"
MARKER_NAME = "cross_checked"
VERIFY_NAME = "verify"
RAW_CHECK_NAME = "cross_check_raw"
HASH_NAME = "hash"

_DECL_START = (
    TokenType.AT, TokenType.PUB, TokenType.FN, TokenType.STRUCT, TokenType.ENUM,
    TokenType.UNION, TokenType.MOD, TokenType.IMPL, TokenType.USE,
    TokenType.CONST, TokenType.TYPE,
)


class _Attributes:
    def __init__(self) -> None:
        self.annotation: Optional[MetaItem] = None
        self.attributes: list[MetaItem] = []
        self.cross_checked = False


class Parser:
    """Recursive-descent parser for xcheck sources."""

    def __init__(self, tokens: list[Token], filename: str = "<stdin>"):
        self.tokens = tokens
        self.pos = 0
        self.filename = filename

    def _current(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return self.tokens[-1]  # EOF

    def _peek(self) -> TokenType:
        return self._current().type

    def _peek_at(self, offset: int) -> TokenType:
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx].type
        return TokenType.EOF

    def _loc(self) -> SourceLocation:
        return self._current().location

    def _advance(self) -> Token:
        tok = self._current()
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def _expect(self, tt: TokenType) -> Token:
        tok = self._current()
        if tok.type != tt:
            raise CompileError(syntax_error(
                f"Expected {tt.name}, got {tok.type.name} ('{tok.value}')",
                tok.location,
            ))
        return self._advance()

    def _match(self, tt: TokenType) -> Optional[Token]:
        if self._peek() == tt:
            return self._advance()
        return None

    # -------------------------------------------------------------------
    # Top-level
    # -------------------------------------------------------------------

    def parse(self) -> Program:
        inner = self._parse_attributes(TokenType.AT_BANG)
        decls: list[Declaration] = []
        while self._peek() != TokenType.EOF:
            decls.append(self._parse_declaration())
        return Program(
            declarations=decls,
            filename=self.filename,
            annotation=inner.annotation,
            attributes=inner.attributes,
            cross_checked=inner.cross_checked,
        )

    def _parse_declaration(self) -> Declaration:
        attrs = self._parse_attributes(TokenType.AT)
        if self._peek() == TokenType.AT_BANG:
            raise CompileError(syntax_error(
                "Inner attributes are only allowed at the start of a file",
                self._loc(),
            ))
        loc = self._loc()
        is_pub = bool(self._match(TokenType.PUB))
        tt = self._peek()
        if tt == TokenType.FN:
            decl: Declaration = self._parse_function()
        elif tt in (TokenType.STRUCT, TokenType.UNION):
            decl = self._parse_struct_like()
        elif tt == TokenType.ENUM:
            decl = self._parse_enum()
        elif tt == TokenType.MOD:
            decl = self._parse_module()
        elif tt == TokenType.IMPL:
            decl = self._parse_impl()
        elif tt == TokenType.USE:
            decl = self._parse_use()
        elif tt == TokenType.CONST:
            decl = self._parse_const()
        elif tt == TokenType.TYPE:
            decl = self._parse_type_alias()
        else:
            raise CompileError(syntax_error(
                f"Expected a declaration, got '{self._current().value}'",
                self._loc(),
            ))
        decl.location = loc
        decl.is_pub = is_pub
        decl.annotation = attrs.annotation
        decl.attributes = attrs.attributes
        decl.cross_checked = attrs.cross_checked
        return decl

    # -------------------------------------------------------------------
    # Attributes
    # -------------------------------------------------------------------

    def _parse_attributes(self, opener: TokenType) -> _Attributes:
        attrs = _Attributes()
        while self._peek() == opener:
            self._advance()
            meta = self._parse_meta_item()
            if meta.name == ANNOTATION_NAME:
                if attrs.annotation is not None:
                    raise CompileError(syntax_error(
                        "Duplicate cross_check annotation", meta.location,
                    ))
                attrs.annotation = meta
            elif meta.name == MARKER_NAME and meta.is_word:
                attrs.cross_checked = True
            else:
                attrs.attributes.append(meta)
        return attrs

    def _parse_meta_name(self) -> Token:
        tok = self._current()
        if tok.type == TokenType.IDENT or tok.value in KEYWORDS:
            return self._advance()
        raise CompileError(syntax_error(
            f"Expected attribute name, got '{tok.value}'", tok.location,
        ))

    def _parse_meta_item(self) -> MetaItem:
        loc = self._loc()
        name = self._parse_meta_name().value
        if self._match(TokenType.ASSIGN):
            return MetaItem(name=name, value=self._parse_literal(), location=loc)
        if self._match(TokenType.LPAREN):
            items: list[Union[MetaItem, Expr]] = []
            while self._peek() != TokenType.RPAREN:
                items.append(self._parse_nested_meta())
                if not self._match(TokenType.COMMA):
                    break
            self._expect(TokenType.RPAREN)
            return MetaItem(name=name, items=items, location=loc)
        return MetaItem(name=name, location=loc)

    def _parse_nested_meta(self) -> Union[MetaItem, Expr]:
        if self._peek() in (TokenType.INT_LIT, TokenType.FLOAT_LIT, TokenType.STRING_LIT,
                            TokenType.TRUE, TokenType.FALSE, TokenType.MINUS):
            return self._parse_literal()
        return self._parse_meta_item()

    def _parse_literal(self) -> Expr:
        loc = self._loc()
        negative = bool(self._match(TokenType.MINUS))
        tok = self._current()
        if tok.type == TokenType.INT_LIT:
            lit = self._parse_int(self._advance())
            if negative:
                lit.value = -lit.value
                lit.text = "-" + (lit.text or "")
            lit.location = loc
            return lit
        if tok.type == TokenType.FLOAT_LIT:
            self._advance()
            text = ("-" if negative else "") + tok.value
            return FloatLiteral(value=float(text), text=text, location=loc)
        if negative:
            raise CompileError(syntax_error("Expected a number after '-'", tok.location))
        if tok.type == TokenType.STRING_LIT:
            self._advance()
            return StringLiteral(value=tok.value, location=loc)
        if tok.type in (TokenType.TRUE, TokenType.FALSE):
            self._advance()
            return BoolLiteral(value=tok.type == TokenType.TRUE, location=loc)
        raise CompileError(syntax_error(
            f"Expected a literal, got '{tok.value}'", tok.location,
        ))

    def _parse_int(self, tok: Token) -> IntLiteral:
        try:
            value = parse_int_literal(tok.value)
        except ValueError:
            raise CompileError(syntax_error(
                f"Invalid integer literal '{tok.value}'", tok.location,
            ))
        return IntLiteral(value=value, text=tok.value, location=tok.location)

    # -------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------

    def _parse_function(self) -> FunctionDecl:
        self._expect(TokenType.FN)
        name = self._expect(TokenType.IDENT).value
        self._expect(TokenType.LPAREN)
        params = self._parse_param_list()
        self._expect(TokenType.RPAREN)

        return_type: Optional[TypeAnnotation] = None
        if self._match(TokenType.ARROW):
            return_type = self._parse_type_annotation()

        body: Optional[list[Statement]] = None
        if not self._match(TokenType.SEMICOLON):
            body = self._parse_block()
        return FunctionDecl(name=name, params=params, return_type=return_type, body=body)

    def _parse_struct_like(self) -> DataTypeDecl:
        kind = self._advance().value  # struct | union
        name = self._expect(TokenType.IDENT).value
        fields: list[FieldDef] = []
        if not self._match(TokenType.SEMICOLON):
            self._expect(TokenType.LBRACE)
            while self._peek() != TokenType.RBRACE:
                fields.append(self._parse_field_def())
                if not self._match(TokenType.COMMA):
                    break
            self._expect(TokenType.RBRACE)
        return DataTypeDecl(kind=kind, name=name, fields=fields)

    def _parse_field_def(self) -> FieldDef:
        loc = self._loc()
        name = self._expect(TokenType.IDENT).value
        self._expect(TokenType.COLON)
        type_ann = self._parse_type_annotation()
        return FieldDef(name=name, type_annotation=type_ann, location=loc)

    def _parse_enum(self) -> DataTypeDecl:
        self._expect(TokenType.ENUM)
        name = self._expect(TokenType.IDENT).value
        self._expect(TokenType.LBRACE)
        variants: list[VariantDef] = []
        while self._peek() != TokenType.RBRACE:
            loc = self._loc()
            vname = self._expect(TokenType.IDENT).value
            vfields: list[TypeAnnotation] = []
            if self._match(TokenType.LPAREN):
                while self._peek() != TokenType.RPAREN:
                    vfields.append(self._parse_type_annotation())
                    if not self._match(TokenType.COMMA):
                        break
                self._expect(TokenType.RPAREN)
            variants.append(VariantDef(name=vname, fields=vfields, location=loc))
            if not self._match(TokenType.COMMA):
                break
        self._expect(TokenType.RBRACE)
        return DataTypeDecl(kind="enum", name=name, variants=variants)

    def _parse_module(self) -> ModuleDecl:
        self._expect(TokenType.MOD)
        name = self._expect(TokenType.IDENT).value
        self._expect(TokenType.LBRACE)
        decls: list[Declaration] = []
        while self._peek() not in (TokenType.RBRACE, TokenType.EOF):
            decls.append(self._parse_declaration())
        self._expect(TokenType.RBRACE)
        return ModuleDecl(name=name, declarations=decls)

    def _parse_impl(self) -> ImplBlock:
        self._expect(TokenType.IMPL)
        target = self._parse_type_annotation()
        self._expect(TokenType.LBRACE)
        items: list[Declaration] = []
        while self._peek() not in (TokenType.RBRACE, TokenType.EOF):
            items.append(self._parse_declaration())
        self._expect(TokenType.RBRACE)
        return ImplBlock(target=target, items=items)

    def _parse_use(self) -> UseDecl:
        self._expect(TokenType.USE)
        path = [self._expect(TokenType.IDENT).value]
        while self._match(TokenType.DOUBLE_COLON):
            path.append(self._expect(TokenType.IDENT).value)
        alias: Optional[str] = None
        if self._match(TokenType.AS):
            alias = self._expect(TokenType.IDENT).value
        self._expect(TokenType.SEMICOLON)
        return UseDecl(path=path, alias=alias)

    def _parse_const(self) -> ConstDecl:
        self._expect(TokenType.CONST)
        name = self._expect(TokenType.IDENT).value
        type_ann: Optional[TypeAnnotation] = None
        if self._match(TokenType.COLON):
            type_ann = self._parse_type_annotation()
        self._expect(TokenType.ASSIGN)
        value = self._parse_expression()
        self._expect(TokenType.SEMICOLON)
        return ConstDecl(name=name, type_annotation=type_ann, value=value)

    def _parse_type_alias(self) -> TypeAlias:
        self._expect(TokenType.TYPE)
        name = self._expect(TokenType.IDENT).value
        self._expect(TokenType.ASSIGN)
        target = self._parse_type_annotation()
        self._expect(TokenType.SEMICOLON)
        return TypeAlias(name=name, target=target)

    # -------------------------------------------------------------------
    # Type annotations
    # -------------------------------------------------------------------

    def _parse_type_annotation(self) -> TypeAnnotation:
        loc = self._loc()
        if self._match(TokenType.LPAREN):
            elements: list[TypeAnnotation] = []
            while self._peek() != TokenType.RPAREN:
                elements.append(self._parse_type_annotation())
                if not self._match(TokenType.COMMA):
                    break
            self._expect(TokenType.RPAREN)
            return TupleType(generic_args=elements, location=loc)
        name = self._expect(TokenType.IDENT).value
        while self._match(TokenType.DOUBLE_COLON):
            name += "::" + self._expect(TokenType.IDENT).value
        generic_args: list[TypeAnnotation] = []
        if self._peek() == TokenType.LT:
            self._advance()
            generic_args.append(self._parse_type_annotation())
            while self._match(TokenType.COMMA):
                generic_args.append(self._parse_type_annotation())
            self._expect(TokenType.GT)
        return TypeAnnotation(name=name, generic_args=generic_args, location=loc)

    # -------------------------------------------------------------------
    # Parameters and patterns
    # -------------------------------------------------------------------

    def _parse_param_list(self) -> list[Parameter]:
        params: list[Parameter] = []
        while self._peek() != TokenType.RPAREN:
            params.append(self._parse_parameter())
            if not self._match(TokenType.COMMA):
                break
        return params

    def _parse_parameter(self) -> Parameter:
        loc = self._loc()
        pattern = self._parse_pattern()
        type_ann: Optional[TypeAnnotation] = None
        if self._match(TokenType.COLON):
            type_ann = self._parse_type_annotation()
        return Parameter(pattern=pattern, type_annotation=type_ann, location=loc)

    def _parse_pattern(self) -> Pattern:
        loc = self._loc()
        if self._match(TokenType.LPAREN):
            elements: list[Pattern] = []
            while self._peek() != TokenType.RPAREN:
                elements.append(self._parse_pattern())
                if not self._match(TokenType.COMMA):
                    break
            self._expect(TokenType.RPAREN)
            return TuplePattern(elements=elements, location=loc)
        mutable = bool(self._match(TokenType.MUT))
        name = self._expect(TokenType.IDENT).value
        if name == "_" and not mutable:
            return WildcardPattern(location=loc)
        return IdentPattern(name=name, mutable=mutable, location=loc)

    # -------------------------------------------------------------------
    # Blocks and statements
    # -------------------------------------------------------------------

    def _parse_block(self) -> list[Statement]:
        self._expect(TokenType.LBRACE)
        stmts: list[Statement] = []
        while self._peek() not in (TokenType.RBRACE, TokenType.EOF):
            stmts.append(self._parse_statement())
        self._expect(TokenType.RBRACE)
        return stmts

    def _parse_statement(self) -> Statement:
        tt = self._peek()
        loc = self._loc()

        if tt in _DECL_START:
            return DeclStmt(declaration=self._parse_declaration(), location=loc)
        if tt == TokenType.RETURN:
            return self._parse_return()
        if tt == TokenType.LET:
            return self._parse_let()
        if tt == TokenType.IF:
            return self._parse_if()
        if tt == TokenType.WHILE:
            return self._parse_while()
        if tt == TokenType.FOR:
            return self._parse_for()
        if tt == TokenType.LBRACE:
            return BlockStmt(body=self._parse_block(), location=loc)
        if tt == TokenType.BREAK:
            self._advance()
            self._expect(TokenType.SEMICOLON)
            return BreakStmt(location=loc)
        if tt == TokenType.CONTINUE:
            self._advance()
            self._expect(TokenType.SEMICOLON)
            return ContinueStmt(location=loc)
        if tt == TokenType.IDENT and self._peek_at(1) == TokenType.LPAREN:
            name = self._current().value
            if name == VERIFY_NAME:
                return self._parse_verify_call()
            if name == RAW_CHECK_NAME:
                return self._parse_raw_check()
        return self._parse_expr_or_assign_stmt()

    def _parse_return(self) -> ReturnStmt:
        loc = self._loc()
        self._expect(TokenType.RETURN)
        value: Optional[Expr] = None
        if self._peek() != TokenType.SEMICOLON:
            value = self._parse_expression()
        self._expect(TokenType.SEMICOLON)
        return ReturnStmt(value=value, location=loc)

    def _parse_let(self) -> LetStmt:
        loc = self._loc()
        self._expect(TokenType.LET)
        pattern = self._parse_pattern()
        type_ann: Optional[TypeAnnotation] = None
        if self._match(TokenType.COLON):
            type_ann = self._parse_type_annotation()
        value: Optional[Expr] = None
        if self._match(TokenType.ASSIGN):
            value = self._parse_expression()
        self._expect(TokenType.SEMICOLON)
        return LetStmt(pattern=pattern, type_annotation=type_ann, value=value, location=loc)

    def _parse_if(self) -> IfStmt:
        loc = self._loc()
        self._expect(TokenType.IF)
        condition = self._parse_expression()
        then_body = self._parse_block()
        else_body: list[Statement] = []
        if self._match(TokenType.ELSE):
            if self._peek() == TokenType.IF:
                else_body = [self._parse_if()]
            else:
                else_body = self._parse_block()
        return IfStmt(condition=condition, then_body=then_body, else_body=else_body, location=loc)

    def _parse_while(self) -> WhileStmt:
        loc = self._loc()
        self._expect(TokenType.WHILE)
        condition = self._parse_expression()
        body = self._parse_block()
        return WhileStmt(condition=condition, body=body, location=loc)

    def _parse_for(self) -> ForStmt:
        loc = self._loc()
        self._expect(TokenType.FOR)
        pattern = self._parse_pattern()
        self._expect(TokenType.IN)
        iterable = self._parse_expression()
        body = self._parse_block()
        return ForStmt(pattern=pattern, iterable=iterable, body=body, location=loc)

    def _parse_verify_call(self) -> VerifyCall:
        loc = self._loc()
        self._advance()
        self._expect(TokenType.LPAREN)
        tag_tok = self._expect(TokenType.IDENT)
        try:
            tag = Tag.parse(tag_tok.value)
        except KeyError:
            raise CompileError(syntax_error(
                f"Unknown verification tag '{tag_tok.value}'", tag_tok.location,
            ))
        self._expect(TokenType.COMMA)
        value = self._parse_expression()
        self._expect(TokenType.RPAREN)
        self._expect(TokenType.SEMICOLON)
        return VerifyCall(tag=tag, value=value, location=loc)

    def _parse_raw_check(self) -> RawCheckStmt:
        loc = self._loc()
        self._advance()
        args = self._parse_call_args()
        self._expect(TokenType.SEMICOLON)
        return RawCheckStmt(args=args, location=loc)

    def _parse_expr_or_assign_stmt(self) -> Statement:
        loc = self._loc()
        expr = self._parse_expression()
        if self._match(TokenType.ASSIGN):
            value = self._parse_expression()
            self._expect(TokenType.SEMICOLON)
            return AssignStmt(target=expr, value=value, location=loc)
        self._expect(TokenType.SEMICOLON)
        return ExprStmt(expr=expr, location=loc)

    # -------------------------------------------------------------------
    # Expressions (precedence climbing)
    # -------------------------------------------------------------------

    def _parse_expression(self) -> Expr:
        return self._parse_or()

    def _parse_binary(self, ops: tuple[TokenType, ...], operand) -> Expr:
        left = operand()
        while self._peek() in ops:
            loc = self._loc()
            op = self._advance().value
            right = operand()
            left = BinaryOp(op=op, left=left, right=right, location=loc)
        return left

    def _parse_or(self) -> Expr:
        return self._parse_binary((TokenType.OR,), self._parse_and)

    def _parse_and(self) -> Expr:
        return self._parse_binary((TokenType.AND,), self._parse_equality)

    def _parse_equality(self) -> Expr:
        return self._parse_binary((TokenType.EQ, TokenType.NEQ), self._parse_comparison)

    def _parse_comparison(self) -> Expr:
        return self._parse_binary(
            (TokenType.LT, TokenType.GT, TokenType.LTE, TokenType.GTE),
            self._parse_additive,
        )

    def _parse_additive(self) -> Expr:
        return self._parse_binary((TokenType.PLUS, TokenType.MINUS), self._parse_multiplicative)

    def _parse_multiplicative(self) -> Expr:
        return self._parse_binary(
            (TokenType.STAR, TokenType.SLASH, TokenType.PERCENT),
            self._parse_cast,
        )

    def _parse_cast(self) -> Expr:
        expr = self._parse_unary()
        while self._peek() == TokenType.AS:
            loc = self._loc()
            self._advance()
            target = self._parse_type_annotation()
            expr = CastExpr(expr=expr, target=target, location=loc)
        return expr

    def _parse_unary(self) -> Expr:
        if self._peek() in (TokenType.MINUS, TokenType.NOT):
            loc = self._loc()
            op = self._advance().value
            operand = self._parse_unary()
            return UnaryOp(op=op, operand=operand, location=loc)
        return self._parse_postfix()

    def _parse_call_args(self) -> list[Expr]:
        self._expect(TokenType.LPAREN)
        args: list[Expr] = []
        while self._peek() != TokenType.RPAREN:
            args.append(self._parse_expression())
            if not self._match(TokenType.COMMA):
                break
        self._expect(TokenType.RPAREN)
        return args

    def _parse_postfix(self) -> Expr:
        expr = self._parse_primary()
        while True:
            loc = self._loc()
            if self._peek() == TokenType.LPAREN:
                expr = FunctionCall(callee=expr, args=self._parse_call_args(), location=loc)
            elif self._peek() == TokenType.DOT:
                self._advance()
                if self._peek() == TokenType.INT_LIT:
                    field_name = self._advance().value
                else:
                    field_name = self._expect(TokenType.IDENT).value
                if self._peek() == TokenType.LPAREN:
                    args = self._parse_call_args()
                    expr = MethodCall(obj=expr, method_name=field_name, args=args, location=loc)
                else:
                    expr = FieldAccess(obj=expr, field_name=field_name, location=loc)
            elif self._peek() == TokenType.LBRACKET:
                self._advance()
                index = self._parse_expression()
                self._expect(TokenType.RBRACKET)
                expr = IndexExpr(obj=expr, index=index, location=loc)
            else:
                break
        return expr

    def _is_hash_expr(self) -> bool:
        # hash<Hasher, Aggregator>(value)
        return (
            self._current().value == HASH_NAME
            and self._peek_at(1) == TokenType.LT
            and self._peek_at(2) == TokenType.IDENT
            and self._peek_at(3) == TokenType.COMMA
            and self._peek_at(4) == TokenType.IDENT
            and self._peek_at(5) == TokenType.GT
            and self._peek_at(6) == TokenType.LPAREN
        )

    def _parse_hash_expr(self, loc: SourceLocation) -> HashExpr:
        self._advance()
        self._expect(TokenType.LT)
        hasher = self._expect(TokenType.IDENT).value
        self._expect(TokenType.COMMA)
        aggregator = self._expect(TokenType.IDENT).value
        self._expect(TokenType.GT)
        self._expect(TokenType.LPAREN)
        operand = self._parse_expression()
        self._expect(TokenType.RPAREN)
        return HashExpr(operand=operand, hasher=hasher, aggregator=aggregator, location=loc)

    def _parse_primary(self) -> Expr:
        tt = self._peek()
        loc = self._loc()

        if tt == TokenType.INT_LIT:
            return self._parse_int(self._advance())

        if tt == TokenType.FLOAT_LIT:
            tok = self._advance()
            return FloatLiteral(value=float(tok.value), text=tok.value, location=loc)

        if tt == TokenType.STRING_LIT:
            tok = self._advance()
            return StringLiteral(value=tok.value, location=loc)

        if tt in (TokenType.TRUE, TokenType.FALSE):
            self._advance()
            return BoolLiteral(value=tt == TokenType.TRUE, location=loc)

        if tt == TokenType.IDENT:
            if self._is_hash_expr():
                return self._parse_hash_expr(loc)
            name = self._advance().value
            while self._match(TokenType.DOUBLE_COLON):
                name += "::" + self._expect(TokenType.IDENT).value
            return Identifier(name=name, location=loc)

        if tt == TokenType.LPAREN:
            self._advance()
            if self._match(TokenType.RPAREN):
                return TupleExpr(elements=[], location=loc)
            first = self._parse_expression()
            if self._match(TokenType.RPAREN):
                return ParenExpr(inner=first, location=loc)
            elements = [first]
            while self._match(TokenType.COMMA):
                if self._peek() == TokenType.RPAREN:
                    break
                elements.append(self._parse_expression())
            self._expect(TokenType.RPAREN)
            return TupleExpr(elements=elements, location=loc)

        if tt == TokenType.LBRACKET:
            self._advance()
            elements = []
            while self._peek() != TokenType.RBRACKET:
                elements.append(self._parse_expression())
                if not self._match(TokenType.COMMA):
                    break
            self._expect(TokenType.RBRACKET)
            return ListLiteral(elements=elements, location=loc)

        raise CompileError(syntax_error(
            f"Unexpected token '{self._current().value}' ({tt.name})",
            loc,
        ))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse(source: str, filename: str = "<stdin>") -> Program:
    """Parse xcheck source code into a declaration tree."""
    tokens = tokenize(source, filename)
    parser = Parser(tokens, filename)
    return parser.parse()
