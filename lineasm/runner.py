from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Sequence, Tuple, Union

from lineasm.instructions import InstructionDef
from lineasm.interpreter import Interpreter
from lineasm.memory import Memory
from lineasm.model import ParseError, ParseResult
from lineasm.parser import Parser
from lineasm.settings import Settings, resolve_settings
from lineasm.source import FileSource, LineSource, StringSource


class Runner:
    """Binds an instruction set to resolved settings.

    Usage::

        runner = Runner([define_instruction("print", ["string"], executor=show)],
                        {"syntax": {"string": r'^"(\\w*)"'}})
        result, error = runner.parse(runner.string_tokenizer('print "Hello"'))
        vm = runner.interpreter(result)
        vm.run()
    """

    def __init__(
        self,
        instructions: Sequence[InstructionDef],
        settings: Union[Settings, Mapping[str, object], None] = None,
    ) -> None:
        self.instructions = list(instructions)
        self.settings = resolve_settings(settings)
        self._parser = Parser(self.instructions, self.settings)

    def string_tokenizer(self, text: str) -> StringSource:
        return StringSource(text, self.settings)

    def file_tokenizer(self, path: Path | str) -> FileSource:
        return FileSource(path, self.settings)

    def parse(self, source: LineSource) -> Tuple[ParseResult, Optional[ParseError]]:
        return self._parser.parse(source)

    def parse_string(self, text: str) -> Tuple[ParseResult, Optional[ParseError]]:
        return self.parse(self.string_tokenizer(text))

    def interpreter(self, result: ParseResult, memory: Optional[Memory] = None) -> Interpreter:
        return Interpreter(result, memory)


def new(
    instructions: Sequence[InstructionDef],
    settings: Union[Settings, Mapping[str, object], None] = None,
) -> Runner:
    return Runner(instructions, settings)
