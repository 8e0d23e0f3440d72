__version__ = "0.1.0"

from molbc.compiler.x86_64_linux import generate
from molbc.lexer.lexer import tokenize
from molbc.parser.parser import parse_program


def compile_source(source):
    """Run lexer, parser and codegen over ``source``, returning NASM text."""
    return generate(parse_program(tokenize(source)))
