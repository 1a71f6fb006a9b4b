"""cax: a small dynamically-typed expression language with two execution engines.

Basic program flow:
    1. Lexer: converts source text into a lazy stream of tokens (see caxlang/lang/lexical.py)
    2. Parser: produces one AST per top-level expression by recursive descent (see caxlang/grammar/)
    3. Evaluation, by either of two independent backends over the same AST:
        - Interpreter: walks the AST directly (see caxlang/lang/interpreter.py)
        - Compiler + VM: lowers the AST into 3-byte register machine chunks and runs them (see caxlang/vm/)

Nothing here prints: callers get tokens, ASTs, RuntimeVals, Programs or disassembly lines back, and errors are raised
as subclasses of caxlang.lang.error.GenericException.
"""

from caxlang.grammar.parser import produce_ast
from caxlang.lang.interpreter import Interpreter
from caxlang.lang.lexical import tokenize
from caxlang.vm.compiler import compile_ast
from caxlang.vm.machine import VM

__all__ = ["tokenize", "produce_ast", "interpret", "compile_source", "execute", "disassemble"]


def interpret(source):
    """Evaluates every top-level expression in source with the tree-walking interpreter."""
    return Interpreter(produce_ast(source)).run()


def compile_source(source):
    """Returns one Program per top-level expression in source."""
    return compile_ast(produce_ast(source))


def execute(source):
    """Evaluates every top-level expression in source on the VM."""
    return [VM.from_program(program).run() for program in compile_source(source)]


def disassemble(source):
    """Returns the disassembled chunks of every top-level expression in source, one list per expression."""
    return [program.disassemble() for program in compile_source(source)]
