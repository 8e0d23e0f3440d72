import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Union

logger = logging.getLogger(__name__)

INT64_MAX = 2**63 - 1


class TokenKind(Enum):
    INT_LITERAL = auto()
    IDENTIFIER = auto()

    RETURN = auto()
    FUNCTION = auto()
    INT_TYPE = auto()
    VAR = auto()
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    BREAK = auto()
    CONTINUE = auto()

    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    SEMICOLON = auto()
    COMMA = auto()

    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    EQUAL = auto()
    DOUBLE_EQUAL = auto()
    NOT_EQUAL = auto()
    LESS_THAN = auto()
    LESS_EQUAL = auto()
    GREATER_THAN = auto()
    GREATER_EQUAL = auto()
    NOT = auto()
    AND = auto()
    OR = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    line: int
    column: int
    value: Union[int, str, None] = None

    def __repr__(self):
        name = self.kind.name
        if self.value is not None:
            name = f"{name}({self.value!r})"
        return f"{name}@{self.line}:{self.column}"


class LexerError(Exception):
    pass


class GenericError(LexerError):
    pass


class EndOfInput(LexerError):
    """Raised by next_token() once the source is exhausted."""


class PositionedLexerError(LexerError):
    def __init__(self, character, line, column):
        super().__init__(character, line, column)
        self.character = character
        self.line = line
        self.column = column

    def __repr__(self):
        return (f"{type(self).__name__}(character={self.character!r}, "
                f"line={self.line}, column={self.column})")

    def __str__(self):
        return f"{self.line}:{self.column}: {self.describe()} {self.character!r}"

    def describe(self):
        return "unexpected character"


class UnexpectedChar(PositionedLexerError):
    pass


class UnknownToken(PositionedLexerError):
    def describe(self):
        return "unknown token"


class Lexer:
    KEYWORDS = {
        "return": TokenKind.RETURN,
        "function": TokenKind.FUNCTION,
        "int": TokenKind.INT_TYPE,
        "var": TokenKind.VAR,
        "if": TokenKind.IF,
        "else": TokenKind.ELSE,
        "while": TokenKind.WHILE,
        "break": TokenKind.BREAK,
        "continue": TokenKind.CONTINUE,
    }

    SYMBOLS = {
        '(': TokenKind.LEFT_PAREN, ')': TokenKind.RIGHT_PAREN,
        '{': TokenKind.LEFT_BRACE, '}': TokenKind.RIGHT_BRACE,
        ';': TokenKind.SEMICOLON, ',': TokenKind.COMMA,
        '+': TokenKind.PLUS, '-': TokenKind.MINUS,
        '*': TokenKind.STAR, '/': TokenKind.SLASH,
        '=': TokenKind.EQUAL,
        '<': TokenKind.LESS_THAN, '>': TokenKind.GREATER_THAN,
        '!': TokenKind.NOT,
    }

    OPERATORS = {
        '==': TokenKind.DOUBLE_EQUAL, '!=': TokenKind.NOT_EQUAL,
        '<=': TokenKind.LESS_EQUAL, '>=': TokenKind.GREATER_EQUAL,
        '&&': TokenKind.AND, '||': TokenKind.OR,
    }

    def __init__(self, text):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1

    def current_char(self) -> Optional[str]:
        return self.text[self.pos] if self.pos < len(self.text) else None

    def peek(self, offset=1) -> Optional[str]:
        return self.text[self.pos + offset] if self.pos + offset < len(self.text) else None

    def advance(self, steps=1):
        for _ in range(steps):
            ch = self.current_char()
            if ch is None:
                return
            self.pos += 1
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1

    def skip_whitespace(self):
        while self.current_char() is not None and self.current_char().isspace():
            self.advance()

    def lex_number(self):
        line, column = self.line, self.column
        start = self.pos
        while self.current_char() is not None and self.current_char() in "0123456789":
            self.advance()

        ch = self.current_char()
        if ch is not None and ch.isalpha():
            raise UnexpectedChar(ch, line, column)

        digits = self.text[start:self.pos]
        value = int(digits)
        if value > INT64_MAX:
            raise UnexpectedChar(digits[-1], line, column)
        return Token(TokenKind.INT_LITERAL, line, column, value)

    def lex_identifier_or_keyword(self):
        line, column = self.line, self.column
        start = self.pos
        while self.current_char() is not None and (self.current_char().isalnum() or self.current_char() == '_'):
            self.advance()
        word = self.text[start:self.pos]
        if word in self.KEYWORDS:
            return Token(self.KEYWORDS[word], line, column)
        return Token(TokenKind.IDENTIFIER, line, column, word)

    def lex_operator_or_symbol(self):
        line, column = self.line, self.column
        ch = self.current_char()
        two = ch + (self.peek() or '')
        if two in self.OPERATORS:
            self.advance(2)
            return Token(self.OPERATORS[two], line, column)
        if ch in self.SYMBOLS:
            self.advance()
            return Token(self.SYMBOLS[ch], line, column)
        raise UnknownToken(ch, line, column)

    def next_token(self) -> Token:
        self.skip_whitespace()
        ch = self.current_char()
        if ch is None:
            raise EndOfInput()
        if ch in "0123456789":
            return self.lex_number()
        if ch.isalpha() or ch == '_':
            return self.lex_identifier_or_keyword()
        return self.lex_operator_or_symbol()

    def tokenize(self) -> List[Token]:
        tokens = []
        while True:
            try:
                tokens.append(self.next_token())
            except EndOfInput:
                break
        logger.debug("lexed %d tokens", len(tokens))
        return tokens


def tokenize(source) -> List[Token]:
    return Lexer(source).tokenize()
