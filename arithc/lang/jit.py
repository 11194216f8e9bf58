"""Native execution of lowered modules through LLVM's MCJIT. Used by `arithc --jit` and to check lowering against the
tree-walking evaluator.
"""

import ctypes

from llvmlite import binding

from arithc.lang.lowering import verify


class JitEngine:
    """Compiles one lowered module to native code. Statement functions can then be called by index."""

    def __init__(self, module):
        binding.initialize_native_target()
        binding.initialize_native_asmprinter()

        target_machine = binding.Target.from_default_triple().create_target_machine()
        self.parsed = verify(module)
        self.engine = binding.create_mcjit_compiler(self.parsed, target_machine)
        self.engine.finalize_object()
        self.engine.run_static_constructors()

    def statement(self, index):
        """Returns a python callable for 'i64 @statement.<index>()'."""
        address = self.engine.get_function_address(f"statement.{index}")
        if not address:
            raise IndexError(f"no statement {index} in module")
        return ctypes.CFUNCTYPE(ctypes.c_int64)(address)

    def run(self, count):
        """Calls the first count statements in source order and yields their results."""
        for index in range(count):
            yield self.statement(index)()
