from molbc.parser.nodes import Function


class SemanticError(Exception):
    pass


class NoEntryFunction(SemanticError):
    pass


class MainIsReserved(SemanticError):
    pass


class StartIsReserved(SemanticError):
    pass


class DuplicateFunction(SemanticError):
    pass


class SemanticAnalyzer:
    ENTRY = "entry"
    RESERVED = "main"
    # label of the process entry preamble
    START = "_start"

    def __init__(self, program):
        self.program = program
        self.functions = {}

    def analyze(self):
        self._collect_functions()
        self._check_entry()

    def _collect_functions(self):
        for node in self.program:
            if not isinstance(node, Function):
                continue

            if node.name == self.RESERVED:
                raise MainIsReserved(
                    f"'{self.RESERVED}' is reserved, name the entrypoint '{self.ENTRY}'"
                )
            if node.name == self.START:
                raise StartIsReserved(
                    f"'{self.START}' is reserved for the process entry point"
                )
            if node.name in self.functions:
                raise DuplicateFunction(f"Duplicate function '{node.name}'")

            self.functions[node.name] = node

    def _check_entry(self):
        if self.ENTRY not in self.functions:
            raise NoEntryFunction(f"Missing '{self.ENTRY}' entrypoint")


def validate(program):
    SemanticAnalyzer(program).analyze()
