"""
RSL Lexer - Tokenizes stack-language source code.

Words are separated by whitespace. Braces always stand alone, '//' starts a
comment running to the end of the line, and double quotes delimit string
literals which may contain whitespace.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class TokenType(Enum):
    """All token types recognized by the lexer."""

    # Keywords
    FN = auto()
    LOOP = auto()
    WHILE = auto()
    IF = auto()
    ELSE = auto()
    LET = auto()
    BREAK = auto()
    CONTINUE = auto()

    # Literals
    WORD = auto()
    NUMBER = auto()
    STRING = auto()

    # Delimiters
    LBRACE = auto()         # {
    RBRACE = auto()         # }

    # Special
    EOF = auto()


# Keyword lookup table
KEYWORDS: dict[str, TokenType] = {
    "fn": TokenType.FN,
    "loop": TokenType.LOOP,
    "while": TokenType.WHILE,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "let": TokenType.LET,
    "break": TokenType.BREAK,
    "continue": TokenType.CONTINUE,
}

WHITESPACE = ' \t\r\n'


@dataclass
class Token:
    """A single token from the source code."""
    type: TokenType
    value: Optional[str | int]
    line: int
    column: int
    end_line: int = 0
    end_column: int = 0

    def __post_init__(self):
        if self.end_line == 0:
            self.end_line = self.line
        if self.end_column == 0:
            self.end_column = self.column

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"


class LexerError(Exception):
    """Error during lexing."""
    def __init__(self, message: str, line: int, column: int):
        self.line = line
        self.column = column
        super().__init__(f"{message} at line {line}, column {column}")


class Lexer:
    """Tokenizes RSL source code."""

    def __init__(self, source: str, filename: str = "<string>"):
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    def current_char(self) -> str:
        """Return current character or empty string at EOF."""
        if self.pos >= len(self.source):
            return ""
        return self.source[self.pos]

    def peek_char(self, offset: int = 1) -> str:
        """Peek ahead by offset characters."""
        pos = self.pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def advance(self) -> str:
        """Advance position and return the character we passed."""
        ch = self.current_char()
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def at_comment(self) -> bool:
        return self.current_char() == '/' and self.peek_char() == '/'

    def skip_comment(self) -> None:
        """Skip a // comment to end of line."""
        while self.current_char() and self.current_char() != '\n':
            self.advance()

    def read_string(self) -> Token:
        """Read a double-quoted string literal."""
        start_line = self.line
        start_col = self.column
        self.advance()  # Skip opening quote

        value = []
        while True:
            ch = self.current_char()

            if not ch:
                raise LexerError("Unterminated string", start_line, start_col)
            if ch == '"':
                self.advance()
                break
            if ch == '\\':
                self.advance()
                escaped = self.current_char()
                if escaped == 'n':
                    value.append('\n')
                elif escaped == 't':
                    value.append('\t')
                elif escaped == 'r':
                    value.append('\r')
                elif escaped == '\\':
                    value.append('\\')
                elif escaped == '"':
                    value.append('"')
                elif escaped == '0':
                    value.append('\0')
                elif escaped == 'x':
                    # Hex escape \xNN
                    self.advance()
                    hex_chars = self.current_char() + self.peek_char()
                    self.advance()
                    try:
                        value.append(chr(int(hex_chars, 16)))
                    except ValueError:
                        raise LexerError(f"Invalid hex escape: \\x{hex_chars}",
                                         self.line, self.column)
                elif not escaped:
                    raise LexerError("Unterminated string", start_line, start_col)
                else:
                    value.append(escaped)
                self.advance()
            else:
                value.append(ch)
                self.advance()

        return Token(TokenType.STRING, ''.join(value), start_line, start_col,
                     self.line, self.column)

    def read_word(self) -> Token:
        """Read a word: keyword, number or any other run of non-space chars."""
        start_line = self.line
        start_col = self.column
        value = []

        while True:
            ch = self.current_char()
            if not ch or ch in WHITESPACE or ch in '{}"' or self.at_comment():
                break
            value.append(self.advance())

        word = ''.join(value)

        if word in KEYWORDS:
            return Token(KEYWORDS[word], word, start_line, start_col,
                         self.line, self.column)

        number = parse_number(word)
        if number is not None:
            return Token(TokenType.NUMBER, number, start_line, start_col,
                         self.line, self.column)

        return Token(TokenType.WORD, word, start_line, start_col,
                     self.line, self.column)

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source and return list of tokens."""
        while self.pos < len(self.source):
            ch = self.current_char()
            start_line = self.line
            start_col = self.column

            if ch in WHITESPACE:
                self.advance()
                continue

            if self.at_comment():
                self.skip_comment()
                continue

            match ch:
                case '"':
                    self.tokens.append(self.read_string())
                case '{':
                    self.advance()
                    self.tokens.append(Token(TokenType.LBRACE, None,
                                             start_line, start_col, self.line, self.column))
                case '}':
                    self.advance()
                    self.tokens.append(Token(TokenType.RBRACE, None,
                                             start_line, start_col, self.line, self.column))
                case _:
                    self.tokens.append(self.read_word())

        self.tokens.append(Token(TokenType.EOF, None, self.line, self.column))
        return self.tokens


def parse_number(word: str) -> Optional[int]:
    """Value of an unsigned decimal, hex (0x) or binary (0b) literal."""
    digits = word.replace('_', '')
    if not digits or not digits[0].isdigit():
        return None
    base = 10
    if digits[:2].lower() == '0x':
        base = 16
    elif digits[:2].lower() == '0b':
        base = 2
    try:
        return int(digits, base)
    except ValueError:
        return None


def tokenize(source: str, filename: str = "<string>") -> list[Token]:
    """Convenience function to tokenize source code."""
    lexer = Lexer(source, filename)
    return lexer.tokenize()
