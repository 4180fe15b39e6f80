from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from lineasm.interpreter import Interpreter


class ErrorKind(Enum):
    DUPLICATE_LABEL = "duplicate_label"
    UNKNOWN_MNEMONIC = "unknown_mnemonic"
    WRONG_ARITY = "wrong_arity"
    OPERAND_MISMATCH = "operand_mismatch"
    UNKNOWN_LABEL = "unknown_label"


@dataclass(frozen=True)
class Problem:
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Label:
    name: str
    location: int  # 1-based slot index


Executor = Callable[["ParsedInstruction", "Interpreter"], Any]


@dataclass(frozen=True)
class ParsedInstruction:
    line_no: int
    text: str
    mnemonic: str
    operands: Tuple[str, ...]
    executor: Executor = field(repr=False, compare=False)


@dataclass
class ParseResult:
    instructions: List[Optional[ParsedInstruction]] = field(default_factory=list)
    labels: Dict[str, Label] = field(default_factory=dict)
    parsed_lines: int = 0

    def instruction_at(self, position: int) -> Optional[ParsedInstruction]:
        if position < 1 or position > len(self.instructions):
            return None
        return self.instructions[position - 1]

    @property
    def instruction_count(self) -> int:
        return sum(1 for instr in self.instructions if instr is not None)

    def get_label(self, name: str) -> Optional[int]:
        label = self.labels.get(name)
        return label.location if label else None


@dataclass(frozen=True)
class ParseError:
    line_no: int
    text: str
    problems: List[Problem]

    @property
    def messages(self) -> List[str]:
        return [problem.message for problem in self.problems]

    def __str__(self) -> str:
        return f"line {self.line_no}: " + "; ".join(self.messages)
