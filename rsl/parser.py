"""
RSL Parser - Recursive descent parser for the stack language.

Builds a Program from tokens. A word is resolved when it is parsed: builtins
first, then functions defined earlier in the file, then let bindings in
scope. Anything else is an error.
"""

from enum import Enum
from typing import Optional

from .lexer import Token, TokenType, tokenize
from .ast_nodes import *
from .memory import encode_literal


class ParseError(Exception):
    """Error during parsing."""
    def __init__(self, message: str, token: Token):
        self.token = token
        self.line = token.line
        self.column = token.column
        super().__init__(f"{message} at line {token.line}, column {token.column}")


# Builtin words and the nodes they parse to
BUILTIN_WORDS: dict[str, type] = {}
BUILTIN_OPS: dict[str, Enum] = {}
for _node_type, _ops in ((ArithWord, MathOp), (CompareWord, CmpOp), (StackWord, StackOp),
                         (MemoryWord, MemoryOp), (OutputWord, OutputOp)):
    for _op in _ops:
        BUILTIN_WORDS[_op.value] = _node_type
        BUILTIN_OPS[_op.value] = _op


class Parser:
    """Recursive descent parser for RSL."""

    def __init__(self, tokens: list[Token], filename: str = "<string>"):
        self.tokens = tokens
        self.filename = filename
        self.pos = 0
        self.functions: dict[str, FunctionDef] = {}

    def current(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[self.pos]

    def advance(self) -> Token:
        """Advance and return previous token."""
        tok = self.current()
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def check(self, *types: TokenType) -> bool:
        """Check if current token is one of the given types."""
        return self.current().type in types

    def match(self, *types: TokenType) -> Optional[Token]:
        """If current token matches, consume and return it."""
        if self.check(*types):
            return self.advance()
        return None

    def expect(self, token_type: TokenType, msg: str = "") -> Token:
        """Expect current token to be of given type."""
        if not self.check(token_type):
            if self.check(TokenType.EOF):
                raise ParseError("Unexpected end of file", self.current())
            if not msg:
                msg = f"Expected {token_type.name}"
            raise ParseError(f"{msg}, got {describe(self.current())}", self.current())
        return self.advance()

    def make_span(self, start: Token) -> Span:
        """Create span from start token to current position."""
        end = self.tokens[self.pos - 1] if self.pos > 0 else start
        return Span(start.line, start.column, end.end_line, end.end_column, self.filename)

    # -------------------------------------------------------------------------
    # Blocks
    # -------------------------------------------------------------------------

    def parse_block(self, lets: list[str]) -> list[Node]:
        """Parse '{' words '}'."""
        self.expect(TokenType.LBRACE, "Expected '{'")
        body = []
        while not self.match(TokenType.RBRACE):
            if self.check(TokenType.EOF):
                raise ParseError("Unexpected end of file", self.current())
            body.append(self.parse_word(lets))
        return body

    def parse_word(self, lets: list[str]) -> Node:
        """Parse a single word or block statement."""
        tok = self.current()

        match tok.type:
            case TokenType.NUMBER:
                self.advance()
                return Push(tok.value, self.make_span(tok))

            case TokenType.STRING:
                self.advance()
                try:
                    data = encode_literal(tok.value)
                except ValueError as e:
                    raise ParseError(str(e), tok) from e
                return PushBytes(data, self.make_span(tok))

            case TokenType.BREAK:
                self.advance()
                return Break(self.make_span(tok))

            case TokenType.CONTINUE:
                self.advance()
                return Continue(self.make_span(tok))

            case TokenType.IF:
                self.advance()
                then_body = self.parse_block(lets)
                else_body = []
                if self.match(TokenType.ELSE):
                    else_body = self.parse_block(lets)
                return IfBlock(then_body, else_body, self.make_span(tok))

            case TokenType.LOOP:
                self.advance()
                return LoopBlock(self.parse_block(lets), self.make_span(tok))

            case TokenType.WHILE:
                self.advance()
                condition = self.parse_block(lets)
                body = self.parse_block(lets)
                return WhileBlock(condition, body, self.make_span(tok))

            case TokenType.LET:
                self.advance()
                names = []
                while not self.check(TokenType.LBRACE):
                    names.append(self.expect(TokenType.WORD, "Expected let binding name").value)
                body = self.parse_block(lets + names)
                return LetBlock(names, body, self.make_span(tok))

            case TokenType.WORD:
                self.advance()
                return self.resolve_word(tok, lets)

        raise ParseError(f"Unexpected {describe(tok)}", tok)

    def resolve_word(self, tok: Token, lets: list[str]) -> Node:
        name = tok.value
        span = self.make_span(tok)
        if name in BUILTIN_WORDS:
            return BUILTIN_WORDS[name](BUILTIN_OPS[name], span)
        if name in self.functions:
            return FunctionCall(name, span)
        if name in lets:
            return LetRef(name, span)
        raise ParseError(f"Unknown word: {name}", tok)

    # -------------------------------------------------------------------------
    # Top level
    # -------------------------------------------------------------------------

    def parse_function(self) -> FunctionDef:
        """Parse fn name { ... }."""
        start = self.expect(TokenType.FN)
        name_tok = self.expect(TokenType.WORD, "Expected function name")
        if name_tok.value in self.functions:
            raise ParseError(f"Function {name_tok.value} is already defined", name_tok)
        body = self.parse_block([])
        return FunctionDef(name_tok.value, body, self.make_span(start))

    def parse_program(self) -> Program:
        """Parse complete program."""
        start = self.current()
        while not self.check(TokenType.EOF):
            if not self.check(TokenType.FN):
                raise ParseError(f"Unexpected {describe(self.current())} at top level, "
                                 f"expected 'fn'", self.current())
            func = self.parse_function()
            self.functions[func.name] = func

        return Program(self.functions, self.make_span(start))


def describe(tok: Token) -> str:
    """Human-readable token description for error messages."""
    if tok.type == TokenType.EOF:
        return "end of file"
    if tok.type == TokenType.LBRACE:
        return "'{'"
    if tok.type == TokenType.RBRACE:
        return "'}'"
    return repr(tok.value)


def parse(source: str, filename: str = "<string>") -> Program:
    """Convenience function to parse source code."""
    tokens = tokenize(source, filename)
    parser = Parser(tokens, filename)
    return parser.parse_program()
