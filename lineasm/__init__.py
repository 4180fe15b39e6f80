"""
lineasm
=======

Define a small line-oriented assembly language, parse source text against it,
and step through the result.

    >>> from lineasm import define_instruction, new
    >>> out = []
    >>> runner = new([define_instruction("say", ["reg"], executor=lambda i, vm: out.append(i.operands[0]))])
    >>> result, error = runner.parse(runner.string_tokenizer("say hello"))
    >>> runner.interpreter(result).run()
    1
    >>> out
    ['hello']
"""

from lineasm.instructions import InstructionDef, define_instruction
from lineasm.interpreter import ExecutionError, Interpreter
from lineasm.memory import Memory, Stack
from lineasm.model import ErrorKind, Label, ParsedInstruction, ParseError, ParseResult, Problem
from lineasm.runner import Runner, new
from lineasm.settings import ConfigurationError, LineAsmError, Settings, load_settings
from lineasm.source import SourceUnavailable, file_tokenizer, string_tokenizer

__version__ = "0.0.1"

__all__ = [
    "ConfigurationError",
    "ErrorKind",
    "ExecutionError",
    "InstructionDef",
    "Interpreter",
    "Label",
    "LineAsmError",
    "Memory",
    "ParsedInstruction",
    "ParseError",
    "ParseResult",
    "Problem",
    "Runner",
    "Settings",
    "SourceUnavailable",
    "Stack",
    "define_instruction",
    "file_tokenizer",
    "load_settings",
    "new",
    "string_tokenizer",
]
