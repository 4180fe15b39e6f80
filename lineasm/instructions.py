from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from lineasm.model import ErrorKind, Executor, ParsedInstruction, Problem
from lineasm.settings import ConfigurationError, Settings

logger = logging.getLogger(__name__)


def missing_executor(instr: ParsedInstruction, interpreter: object) -> None:
    raise ConfigurationError(
        f"Instruction '{instr.mnemonic}' (line {instr.line_no}) has no executor bound."
    )


@dataclass(frozen=True)
class InstructionDef:
    mnemonic: str
    operand_types: Tuple[str, ...]
    executor: Executor = missing_executor

    @property
    def arity(self) -> int:
        return len(self.operand_types)

    def try_parse(
        self,
        tokens: Sequence[str],
        settings: Settings,
        line_no: int = 0,
        text: str = "",
    ) -> Union[ParsedInstruction, Problem]:
        if len(tokens) != self.arity:
            return Problem(
                ErrorKind.WRONG_ARITY,
                f"{self.mnemonic} expects {self.arity} operand(s), got {len(tokens)}",
            )
        operands: List[str] = []
        for token, operand_type in zip(tokens, self.operand_types):
            rule = settings.rule_for(operand_type)
            match = rule.search(token)
            if not match:
                return Problem(
                    ErrorKind.OPERAND_MISMATCH,
                    f"{self.mnemonic}: operand '{token}' is not a valid {operand_type}",
                )
            operands.append(match.group(1) if rule.groups else match.group(0))
        return ParsedInstruction(
            line_no=line_no,
            text=text,
            mnemonic=self.mnemonic,
            operands=tuple(operands),
            executor=self.executor,
        )

    def signature(self) -> str:
        if not self.operand_types:
            return self.mnemonic
        return f"{self.mnemonic} {', '.join(self.operand_types)}"


def define_instruction(
    mnemonic: str,
    operand_types: Iterable[str] = (),
    executor: Optional[Executor] = None,
) -> InstructionDef:
    """Build an instruction definition.

    Example::

        define_instruction("jmp", ["label"], executor=lambda instr, vm: vm.jump(instr.operands[0]))

    Without an executor the definition can still be parsed, but running it
    raises ConfigurationError.
    """
    if not isinstance(mnemonic, str) or not mnemonic.strip():
        raise ConfigurationError("Instruction mnemonic must be a non-empty string.")
    types = tuple(operand_types)
    for operand_type in types:
        if not isinstance(operand_type, str) or not operand_type:
            raise ConfigurationError(f"Instruction {mnemonic} has an invalid operand type: {operand_type!r}")
    if executor is None:
        logger.warning("Instruction %s defined without an executor", mnemonic)
        executor = missing_executor
    elif not callable(executor):
        raise ConfigurationError(f"Executor for {mnemonic} must be callable.")
    return InstructionDef(mnemonic=mnemonic.strip(), operand_types=types, executor=executor)


def resolve_instruction(
    definitions: Sequence[InstructionDef],
    mnemonic: str,
    tokens: Sequence[str],
    settings: Settings,
    line_no: int = 0,
    text: str = "",
) -> Union[ParsedInstruction, List[Problem]]:
    problems: List[Problem] = []
    for defn in definitions:
        if defn.mnemonic != mnemonic:
            continue
        result = defn.try_parse(tokens, settings, line_no, text)
        if isinstance(result, ParsedInstruction):
            return result
        logger.debug("Line %d: %s rejected: %s", line_no, defn.signature(), result.message)
        problems.append(result)
    if not problems:
        return [Problem(ErrorKind.UNKNOWN_MNEMONIC, f"no instruction named {mnemonic}")]
    return problems
