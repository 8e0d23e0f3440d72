from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class Operator(Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    NEGATE = "neg"
    NOT = "!"
    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS_THAN = "<"
    LESS_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_EQUAL = ">="
    AND = "&&"
    OR = "||"


class Type(Enum):
    INT = "int"
    VAR = "var"


class Node:
    pass


# expressions

@dataclass(frozen=True)
class Variable(Node):
    name: str


@dataclass(frozen=True)
class IntLiteral(Node):
    value: int


@dataclass(frozen=True)
class UnaryOperation(Node):
    operator: Operator
    operand: "Expression"


@dataclass(frozen=True)
class BinaryOperation(Node):
    left: "Expression"
    operator: Operator
    right: "Expression"


@dataclass(frozen=True)
class FunctionCall(Node):
    callee: "Expression"
    arguments: Tuple["Expression", ...] = ()


Expression = Union[Variable, IntLiteral, UnaryOperation, BinaryOperation, FunctionCall]


# statements

@dataclass(frozen=True)
class Return(Node):
    expression: Expression


@dataclass(frozen=True)
class VariableDeclare(Node):
    type: Type
    name: str
    expression: Expression


@dataclass(frozen=True)
class VariableAssignment(Node):
    name: str
    expression: Expression


@dataclass(frozen=True)
class Block(Node):
    statements: Tuple["Statement", ...] = ()


@dataclass(frozen=True)
class ExpressionStatement(Node):
    expression: Expression


@dataclass(frozen=True)
class Else(Node):
    statement: "Statement"


@dataclass(frozen=True)
class If(Node):
    condition: Expression
    then: "Statement"
    otherwise: Optional[Else] = None


Statement = Union[Return, VariableDeclare, VariableAssignment, Block,
                  ExpressionStatement, If, Else]


# top level

@dataclass(frozen=True)
class Function(Node):
    name: str
    body: Statement


@dataclass(frozen=True)
class TopLevelStatement(Node):
    statement: Statement


TopLevel = Union[Function, TopLevelStatement]
