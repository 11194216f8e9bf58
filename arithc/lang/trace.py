"""Optional append-only debug trace. One line per token produced by the lexer and one per binary operation lowered.

The trace is purely diagnostic: a trace file that can't be opened produces a warning and the run goes on untraced.
"""


class Trace:
    """Line-oriented trace sink. Opened in append mode, flushed after every line."""

    def __init__(self, path, error_handler=None):
        self.path = path
        try:
            self.file = open(path, "a")
        except OSError as exc:
            self.file = None
            if error_handler is not None:
                error_handler.warn("could not open trace file '{}' ({}), continuing without trace",
                                   (path, exc.strerror or exc))

    @property
    def enabled(self):
        return self.file is not None

    def write(self, line):
        if self.file is not None:
            self.file.write(line + "\n")
            self.file.flush()

    def token(self, token):
        self.write(f"token {token}")

    def lowered(self, op, left, right, result):
        """Records one binary operation lowering. left, right and result are llvmlite values."""
        self.write(f"lower {op.name} {left.get_reference()} {right.get_reference()} -> {result.get_reference()}")

    def close(self):
        if self.file is not None:
            self.file.close()
            self.file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
