import logging
from typing import List, Optional

from molbc.lexer.lexer import Token, TokenKind
from molbc.parser.nodes import (
    BinaryOperation, Block, Else, ExpressionStatement, Function, FunctionCall,
    If, IntLiteral, Operator, Return, TopLevelStatement, Type, UnaryOperation,
    Variable, VariableAssignment, VariableDeclare,
)

logger = logging.getLogger(__name__)


class ParserError(Exception):
    pass


class Parser:
    TYPE_TOKENS = {
        TokenKind.INT_TYPE: Type.INT,
        TokenKind.VAR: Type.VAR,
    }

    # binding power, higher binds tighter
    PRECEDENCE = {
        TokenKind.OR: 1,
        TokenKind.AND: 2,
        TokenKind.DOUBLE_EQUAL: 3, TokenKind.NOT_EQUAL: 3,
        TokenKind.LESS_THAN: 4, TokenKind.LESS_EQUAL: 4,
        TokenKind.GREATER_THAN: 4, TokenKind.GREATER_EQUAL: 4,
        TokenKind.PLUS: 5, TokenKind.MINUS: 5,
        TokenKind.STAR: 6, TokenKind.SLASH: 6,
    }

    BINARY_OPERATORS = {
        TokenKind.OR: Operator.OR,
        TokenKind.AND: Operator.AND,
        TokenKind.DOUBLE_EQUAL: Operator.EQUAL,
        TokenKind.NOT_EQUAL: Operator.NOT_EQUAL,
        TokenKind.LESS_THAN: Operator.LESS_THAN,
        TokenKind.LESS_EQUAL: Operator.LESS_EQUAL,
        TokenKind.GREATER_THAN: Operator.GREATER_THAN,
        TokenKind.GREATER_EQUAL: Operator.GREATER_EQUAL,
        TokenKind.PLUS: Operator.ADD,
        TokenKind.MINUS: Operator.SUBTRACT,
        TokenKind.STAR: Operator.MULTIPLY,
        TokenKind.SLASH: Operator.DIVIDE,
    }

    UNARY_OPERATORS = {
        TokenKind.MINUS: Operator.NEGATE,
        TokenKind.NOT: Operator.NOT,
    }

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def at_end(self):
        return self.pos >= len(self.tokens)

    def current(self) -> Optional[Token]:
        return None if self.at_end() else self.tokens[self.pos]

    def peek(self, offset=1) -> Optional[Token]:
        idx = self.pos + offset
        return self.tokens[idx] if idx < len(self.tokens) else None

    def check(self, kind):
        tok = self.current()
        return tok is not None and tok.kind == kind

    def advance(self):
        tok = self.current()
        self.pos += 1
        return tok

    def eat(self, kind):
        tok = self.current()
        if tok is None:
            raise ParserError(f"expected {kind.name}, got end of input")
        if tok.kind != kind:
            raise ParserError(f"expected {kind.name}, got {tok!r}")
        self.advance()
        return tok

    def parse_program(self):
        items = []
        try:
            while not self.at_end():
                items.append(self.parse_toplevel())
        except RecursionError:
            raise ParserError("expression nested too deeply") from None
        logger.debug("parsed %d top-level items", len(items))
        return items

    def parse_toplevel(self):
        if self.check(TokenKind.FUNCTION):
            return self.parse_function()
        return TopLevelStatement(self.parse_statement())

    def parse_function(self):
        self.eat(TokenKind.FUNCTION)
        name = self.eat(TokenKind.IDENTIFIER).value
        self.eat(TokenKind.LEFT_PAREN)
        self.eat(TokenKind.RIGHT_PAREN)
        body = self.parse_block()
        return Function(name, body)

    def parse_block(self):
        self.eat(TokenKind.LEFT_BRACE)
        stmts = []
        while not self.check(TokenKind.RIGHT_BRACE):
            if self.at_end():
                raise ParserError("unterminated block, expected RIGHT_BRACE")
            stmts.append(self.parse_statement())
        self.eat(TokenKind.RIGHT_BRACE)
        return Block(tuple(stmts))

    def parse_statement(self):
        tok = self.current()
        if tok is None:
            raise ParserError("expected statement, got end of input")

        if tok.kind == TokenKind.RETURN:
            self.advance()
            expr = self.parse_expression()
            self.eat(TokenKind.SEMICOLON)
            return Return(expr)

        if tok.kind in self.TYPE_TOKENS:
            return self.parse_declaration()

        if tok.kind == TokenKind.IDENTIFIER:
            nxt = self.peek()
            if nxt is not None and nxt.kind == TokenKind.EQUAL:
                return self.parse_assignment()

        if tok.kind == TokenKind.LEFT_BRACE:
            return self.parse_block()

        if tok.kind == TokenKind.IF:
            return self.parse_if()

        expr = self.parse_expression()
        self.eat(TokenKind.SEMICOLON)
        return ExpressionStatement(expr)

    def parse_declaration(self):
        var_type = self.TYPE_TOKENS[self.advance().kind]
        name = self.eat(TokenKind.IDENTIFIER).value
        self.eat(TokenKind.EQUAL)
        expr = self.parse_expression()
        self.eat(TokenKind.SEMICOLON)
        return VariableDeclare(var_type, name, expr)

    def parse_assignment(self):
        name = self.eat(TokenKind.IDENTIFIER).value
        self.eat(TokenKind.EQUAL)
        expr = self.parse_expression()
        self.eat(TokenKind.SEMICOLON)
        return VariableAssignment(name, expr)

    def parse_if(self):
        self.eat(TokenKind.IF)
        self.eat(TokenKind.LEFT_PAREN)
        cond = self.parse_expression()
        self.eat(TokenKind.RIGHT_PAREN)
        then = self.parse_statement()

        otherwise = None
        if self.check(TokenKind.ELSE):
            self.advance()
            otherwise = Else(self.parse_statement())

        return If(cond, then, otherwise)

    def parse_expression(self, min_prec=1):
        left = self.parse_unary()

        while self.current() is not None and self.current().kind in self.PRECEDENCE:
            prec = self.PRECEDENCE[self.current().kind]
            if prec < min_prec:
                break
            op = self.advance()
            right = self.parse_expression(prec + 1)
            left = BinaryOperation(left, self.BINARY_OPERATORS[op.kind], right)

        return left

    def parse_unary(self):
        tok = self.current()
        if tok is not None and tok.kind in self.UNARY_OPERATORS:
            self.advance()
            return UnaryOperation(self.UNARY_OPERATORS[tok.kind], self.parse_unary())
        return self.parse_postfix()

    def parse_postfix(self):
        expr = self.parse_primary()
        while self.check(TokenKind.LEFT_PAREN):
            expr = self.parse_call(expr)
        return expr

    def parse_primary(self):
        tok = self.current()
        if tok is None:
            raise ParserError("expected expression, got end of input")

        if tok.kind == TokenKind.INT_LITERAL:
            self.advance()
            return IntLiteral(tok.value)

        if tok.kind == TokenKind.IDENTIFIER:
            self.advance()
            return Variable(tok.value)

        if tok.kind == TokenKind.LEFT_PAREN:
            self.advance()
            expr = self.parse_expression()
            self.eat(TokenKind.RIGHT_PAREN)
            return expr

        raise ParserError(f"unexpected token {tok!r}")

    def parse_call(self, callee):
        self.eat(TokenKind.LEFT_PAREN)
        args = []
        if not self.check(TokenKind.RIGHT_PAREN):
            args.append(self.parse_expression())
            while self.check(TokenKind.COMMA):
                self.advance()
                args.append(self.parse_expression())
        self.eat(TokenKind.RIGHT_PAREN)
        return FunctionCall(callee, tuple(args))


def parse_program(tokens):
    return Parser(tokens).parse_program()
