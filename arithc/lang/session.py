"""Session control for arithc. Reads a source file, parses it, and runs it through one of the back ends: the
tree-walking evaluator, LLVM IR emission, or native execution of the lowered code.
"""

from arithc.lang.error import GenericException, UsageError
from arithc.lang.evaluator import evaluate
from arithc.lang.jit import JitEngine
from arithc.lang.lowering import CodegenContext, verify
from arithc.pure.parser import parse
from arithc.pure.syntax import display, infix


class Session:
    """Governs the compilation of one source file. The whole file is parsed up front, so a syntax error anywhere
    means no statement runs.
    """

    def __init__(self, error_handler, path, trace=None, source=None):
        self.error_handler = error_handler
        self.path = path    # used for error messages
        self.trace = trace  # arithc.lang.trace.Trace or None

        if source is None:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    source = file.read()
            except (OSError, UnicodeDecodeError):
                raise UsageError("'{}' could not be opened", path)

        self.source = source
        self.error_handler.register_source(path, source)

        self.program = parse(source, trace)
        self.results = []  # values of the statements run so far, in source order

    def run(self, echo=True):
        """Evaluates statements in source order, printing each result before the next statement runs."""
        for node in self.program:
            value = evaluate(node)
            self.results.append(value)
            if echo:
                print(value)
        return self.results

    def lower(self):
        """Lowers the whole program into a new LLVM module and verifies it."""
        module = CodegenContext(name=self.path, trace=self.trace).lower_program(self.program)
        verify(module)
        return module

    def emit(self):
        """Returns the textual LLVM IR of the program."""
        return str(self.lower())

    def jit(self, echo=True):
        """Like run, but prints the result of the natively executed lowered code. Each statement is also evaluated
        first, so division by zero is reported the same way as in run and the two back ends are checked against each
        other.
        """
        engine = JitEngine(self.lower())
        for index, node in enumerate(self.program):
            expected = evaluate(node)
            value = engine.statement(index)()
            if value != expected:
                msg = "lowered code returned {} but evaluation gave {}"
                raise GenericException(msg, (value, expected), offset=node.offset, internal=True)

            self.results.append(value)
            if echo:
                print(value)
        return self.results

    def ast(self):
        """Returns a readable dump of every statement's syntax tree."""
        return "\n".join(f"{infix(node)};\n{display(node, 2)}" for node in self.program)
