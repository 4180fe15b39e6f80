from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from lineasm.memory import Memory, Stack
from lineasm.model import ErrorKind, ParsedInstruction, ParseResult, Problem
from lineasm.settings import LineAsmError

logger = logging.getLogger(__name__)


class ExecutionError(LineAsmError):
    def __init__(self, message: str, line_no: int = 0, text: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.line_no = line_no
        self.text = text


class Interpreter:
    def __init__(self, result: ParseResult, memory: Optional[Memory] = None) -> None:
        self.result = result
        self.memory = memory if memory is not None else Memory()
        self.pc = 1
        self.current: Optional[ParsedInstruction] = None

    @property
    def stack(self) -> Stack:
        return self.memory.stack

    @property
    def heap(self) -> Dict[Any, Any]:
        return self.memory.heap

    def reset(self, clear_memory: bool = False) -> None:
        self.pc = 1
        self.current = None
        if clear_memory:
            self.memory.reset()

    def jump(self, target: Union[int, str]) -> Optional[Problem]:
        """Move the counter to a label or a 1-based position.

        A string names a label; if no such label exists and the string is all
        digits it is taken as a position, so decoded ``imm`` operands can be
        passed straight through. Returns a Problem for an unknown label and
        raises ExecutionError for positions outside the program.
        """
        if isinstance(target, str):
            position = self.result.get_label(target)
            if position is None and target.isdigit():
                position = int(target)
            if position is None:
                return Problem(ErrorKind.UNKNOWN_LABEL, f"Unknown label: {target}")
        elif isinstance(target, int) and not isinstance(target, bool):
            position = target
        else:
            raise self._error(f"Invalid jump target: {target!r}")
        if position < 0 or position > self.result.parsed_lines:
            raise self._error(
                f"Jump target {position} outside program (0..{self.result.parsed_lines})"
            )
        logger.debug("Jump to %s (%d)", target, position)
        self.pc = position
        return None

    def _next_position(self) -> int:
        position = self.pc
        size = len(self.result.instructions)
        while position <= size and self.result.instruction_at(position) is None:
            position += 1
        return position

    def current_instruction(self) -> Optional[ParsedInstruction]:
        """Instruction the next step() will run; leaves the counter alone."""
        return self.result.instruction_at(self._next_position())

    def step(self) -> bool:
        position = self._next_position()
        instr = self.result.instruction_at(position)
        if instr is None:
            self.pc = position
            return False
        self.pc = position + 1
        self.current = instr
        logger.debug("Line %d: %s %s", instr.line_no, instr.mnemonic, " ".join(instr.operands))
        outcome = instr.executor(instr, self)
        if outcome is None:
            return True
        return bool(outcome)

    def run(self) -> int:
        executed = 0
        while self.current_instruction() is not None:
            executed += 1
            if not self.step():
                break
        return executed

    def _error(self, message: str) -> ExecutionError:
        if self.current is not None:
            return ExecutionError(message, self.current.line_no, self.current.text)
        return ExecutionError(message)
