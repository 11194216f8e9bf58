"""Lowering of arithc syntax trees to LLVM IR, using llvmlite as backend.

Lowering walks a tree exactly like evaluator.evaluate does (left child, right child, then the node) but emits one
value per node instead of computing it: an i64 constant for a Number and one add/sub/mul/sdiv instruction for a
BinaryOp. Executing the emitted code gives the same result as evaluate for every statement that evaluates without
error.

Module layout produced by CodegenContext:

```
define i64 @"statement.0"() { ... ret i64 %result }     ; one function per statement, in source order
...
define i32 @main() {                                    ; calls each statement and prints its value with printf
  ...
  ret i32 0
}
```
"""

from llvmlite import binding, ir

from arithc.lang.error import GenericException
from arithc.pure.lexical import TokenType
from arithc.pure.syntax import BinaryOp, Number, postorder


I64 = ir.IntType(64)
I32 = ir.IntType(32)
I8 = ir.IntType(8)

INSTRUCTIONS = {
    TokenType.ADD: ("add", "addtmp"),
    TokenType.SUB: ("sub", "subtmp"),
    TokenType.MULT: ("mul", "multmp"),
    TokenType.DIV: ("sdiv", "divtmp"),
}


def lower(node, builder, trace=None):
    """Emits node into builder at its current position and returns the ir.Value holding node's result. trace, if
    given, gets one line per BinaryOp and has no effect on what is emitted.
    """
    values = []
    for sub_node in postorder(node):
        if isinstance(sub_node, Number):
            values.append(ir.Constant(I64, sub_node.value))
        elif isinstance(sub_node, BinaryOp):
            right = values.pop()
            left = values.pop()

            try:
                method, name = INSTRUCTIONS[sub_node.op]
            except KeyError:
                raise GenericException("'{}' is not a binary operator", sub_node.op.name, internal=True)

            result = getattr(builder, method)(left, right, name=name)
            if trace is not None:
                trace.lowered(sub_node.op, left, right, result)
            values.append(result)
        else:
            raise GenericException("expected syntax tree node, got '{}'", repr(sub_node), internal=True)
    return values.pop()


class CodegenContext:
    """Holds the module being generated for one compilation run. Create a new context for every run."""
    FORMAT = "%lld\n\0"

    def __init__(self, name="arithc", trace=None):
        self.module = ir.Module(name=name)
        self.module.triple = binding.get_default_triple()
        self.trace = trace
        self.statements = []  # ir.Functions, in source order

    def lower_statement(self, node):
        """Lowers node into a new function 'i64 @statement.N()' and returns that function."""
        func = ir.Function(self.module, ir.FunctionType(I64, []), name=f"statement.{len(self.statements)}")
        builder = ir.IRBuilder(func.append_basic_block("entry"))
        builder.ret(lower(node, builder, self.trace))

        self.statements.append(func)
        return func

    def lower_program(self, program):
        for node in program:
            self.lower_statement(node)
        return self.finish()

    def _format_string(self):
        fmt = bytearray(CodegenContext.FORMAT.encode("ascii"))
        array_type = ir.ArrayType(I8, len(fmt))

        global_fmt = ir.GlobalVariable(self.module, array_type, name=".fmt")
        global_fmt.linkage = "internal"
        global_fmt.global_constant = True
        global_fmt.initializer = ir.Constant(array_type, fmt)
        return global_fmt

    def finish(self):
        """Adds 'i32 @main()', which prints every statement's result in source order. Returns the module."""
        printf = ir.Function(self.module, ir.FunctionType(I32, [I8.as_pointer()], var_arg=True), name="printf")
        global_fmt = self._format_string()

        main = ir.Function(self.module, ir.FunctionType(I32, []), name="main")
        builder = ir.IRBuilder(main.append_basic_block("entry"))
        fmt = builder.bitcast(global_fmt, I8.as_pointer())

        for func in self.statements:
            builder.call(printf, [fmt, builder.call(func, [])])
        builder.ret(ir.Constant(I32, 0))

        return self.module


def verify(module):
    """Parses module with LLVM and runs the verifier. Returns the parsed binding.ModuleRef."""
    try:
        parsed = binding.parse_assembly(str(module))
        parsed.verify()
    except RuntimeError as exc:
        raise GenericException("module verification failed: {}", str(exc).strip(), internal=True)
    return parsed
