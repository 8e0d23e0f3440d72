import argparse
import logging
import sys

from molbc import __version__
from molbc.compiler.x86_64_linux import CodegenError, x86_64_Linux
from molbc.config import Config
from molbc.lexer.lexer import Lexer, LexerError
from molbc.parser.parser import Parser, ParserError
from molbc.semantic import SemanticAnalyzer, SemanticError
from molbc.toolchain import ToolchainError, build

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="molbc", description="molb compiler")
    parser.add_argument("--version", action="version",
                        version=f"molbc {__version__}",
                        help="Show molbc version")
    parser.add_argument("source", help="molb source file to compile")
    parser.add_argument("-o", "--output", default="out",
                        help="Executable name (default: out)")
    parser.add_argument("--asm", default="out.asm",
                        help="Path of the generated assembly (default: out.asm)")
    parser.add_argument("--dump-tokens", action="store_true",
                        help="Print the token list before compiling")
    parser.add_argument("--dump-ast", action="store_true",
                        help="Print the syntax tree before compiling")
    parser.add_argument("--no-link", action="store_true",
                        help="Only write the assembly, do not run nasm/ld")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log each compilation phase")
    return parser.parse_args(argv)


def read_source(path):
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise SystemExit(f"error: could not read '{path}': {e.strerror}")
    except UnicodeDecodeError as e:
        raise SystemExit(f"error: could not read '{path}': not valid {e.encoding} "
                         f"(byte {e.object[e.start]:#04x} at offset {e.start})")


def compile_file(config):
    source = read_source(config.source)

    tokens = Lexer(source).tokenize()
    if config.dump_tokens:
        print("Tokens:")
        for tok in tokens:
            print(f"  {tok!r}")

    program = Parser(tokens).parse_program()
    if config.dump_ast:
        print("AST:")
        for node in program:
            print(f"  {node}")

    SemanticAnalyzer(program).analyze()
    return x86_64_Linux(program).generate()


def main(argv=None):
    args = parse_args(argv)
    config = Config.from_args(args)

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        asm = compile_file(config)
    except (LexerError, ParserError, SemanticError, CodegenError) as e:
        print(f"error: {e!r}", file=sys.stderr)
        return 1

    with open(config.asm_path, "w") as f:
        f.write(asm)
    logger.debug("wrote %s", config.asm_path)

    if not config.link:
        return 0

    try:
        build(config.asm_path, config.obj_path, config.output)
    except ToolchainError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
