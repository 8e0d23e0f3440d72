import logging

from molbc.parser.nodes import (
    BinaryOperation, Block, Function, IntLiteral, Operator, Return,
    TopLevelStatement, UnaryOperation,
)

logger = logging.getLogger(__name__)


class CodegenError(Exception):
    pass


class x86_64_Linux:
    """Linux codegen for x86_64 arch using NASM syntax.

    Expressions are evaluated into rax. Binary operations save the left
    operand on the machine stack while the right one is evaluated, then pop
    it into rbx, so nesting depth is bounded only by the stack.
    """

    ENTRY = "entry"

    ARITHMETIC = {
        Operator.ADD: "add",
        Operator.SUBTRACT: "sub",
        Operator.MULTIPLY: "imul",
    }

    SETCC = {
        Operator.EQUAL: "sete",
        Operator.NOT_EQUAL: "setne",
        Operator.LESS_THAN: "setl",
        Operator.LESS_EQUAL: "setle",
        Operator.GREATER_THAN: "setg",
        Operator.GREATER_EQUAL: "setge",
    }

    def __init__(self, program):
        self.program = program
        self.lines = []

    def emit(self, line=""):
        self.lines.append(line)

    def generate(self):
        self.lines = []

        self.emit("global _start")
        self.emit("_start:")
        self.emit(f"    call {self.ENTRY}")
        self.emit("    mov rdi, rax")
        self.emit("    mov rax, 60")
        self.emit("    syscall")
        self.emit()

        for node in self.program:
            if isinstance(node, Function):
                self.gen_function(node)
            elif isinstance(node, TopLevelStatement):
                self.gen_stmt(node.statement)
            else:
                raise CodegenError(f"error: unsupported top-level item {type(node).__name__}")

        asm = "\n".join(self.lines) + "\n"
        logger.debug("generated %d lines of assembly", len(self.lines))
        return asm

    def gen_function(self, fn):
        self.emit(f"{fn.name}:")
        body = fn.body.statements if isinstance(fn.body, Block) else (fn.body,)
        for stmt in body:
            self.gen_stmt(stmt)

    def gen_stmt(self, node):
        if isinstance(node, Return):
            self.gen_expr(node.expression)
            self.emit("    ret")
            return
        raise CodegenError(f"error: unsupported statement {type(node).__name__}")

    def gen_expr(self, node):
        # post-order walk over an explicit work list, popped from the end
        work = [("expr", node)]
        while work:
            action, item = work.pop()

            if action == "push":
                self.emit("    push rax")
            elif action == "binop":
                self.emit("    pop rbx")
                self.gen_binop(item)
            elif action == "unary":
                self.gen_unop(item)

            elif isinstance(item, IntLiteral):
                self.emit(f"    mov rax, {item.value}")

            elif isinstance(item, UnaryOperation):
                work.append(("unary", item.operator))
                work.append(("expr", item.operand))

            elif isinstance(item, BinaryOperation):
                work.append(("binop", item.operator))
                work.append(("expr", item.right))
                work.append(("push", None))
                work.append(("expr", item.left))

            else:
                raise CodegenError(f"error: unsupported expr {type(item).__name__}")

    def gen_unop(self, op):
        if op == Operator.NEGATE:
            self.emit("    neg rax")
        elif op == Operator.NOT:
            self.emit("    cmp rax, 0")
            self.emit("    sete al")
            self.emit("    movzx rax, al")
        else:
            raise CodegenError(f"error: unsupported unary operator {op.name}")

    def gen_binop(self, op):
        # left operand in rbx, right operand in rax
        if op in self.ARITHMETIC:
            self.emit(f"    {self.ARITHMETIC[op]} rbx, rax")
            self.emit("    mov rax, rbx")
            return

        if op == Operator.DIVIDE:
            self.emit("    xchg rax, rbx")
            self.emit("    xor rdx, rdx")
            self.emit("    idiv rbx")
            return

        if op in self.SETCC:
            self.emit("    cmp rbx, rax")
            self.emit(f"    {self.SETCC[op]} al")
            self.emit("    movzx rax, al")
            return

        if op in (Operator.AND, Operator.OR):
            # normalize both sides to 0/1 before combining
            self.emit("    cmp rbx, 0")
            self.emit("    setne bl")
            self.emit("    cmp rax, 0")
            self.emit("    setne al")
            self.emit(f"    {'and' if op == Operator.AND else 'or'} al, bl")
            self.emit("    movzx rax, al")
            return

        raise CodegenError(f"error: unsupported operator {op.name}")


def generate(program):
    return x86_64_Linux(program).generate()
