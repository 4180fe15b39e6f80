from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from lineasm.instructions import InstructionDef, resolve_instruction
from lineasm.model import ErrorKind, Label, ParsedInstruction, ParseError, ParseResult, Problem
from lineasm.settings import Settings, resolve_settings
from lineasm.source import LineSource

logger = logging.getLogger(__name__)


def split_tokens(text: str, settings: Settings) -> List[str]:
    return [match.group(0) for match in settings.separator.finditer(text)]


def _split_label(text: str, settings: Settings) -> Tuple[Optional[str], str]:
    if not settings.labels_enabled:
        return None, text
    match = settings.label.match(text)
    if not match:
        return None, text
    return match.group(1), (match.group(2) or "").strip()


class Parser:
    """Turns a line source into a ParseResult.

    Every consumed line owns one slot in ``ParseResult.instructions``; lines
    that emit nothing (blank, comment-only, label-only) leave ``None`` there.
    Parsing stops at the first line that fails.
    """

    def __init__(self, definitions: Sequence[InstructionDef], settings: Optional[Settings] = None) -> None:
        self.definitions = list(definitions)
        self.settings = resolve_settings(settings)

    def parse(self, source: LineSource) -> Tuple[ParseResult, Optional[ParseError]]:
        result = ParseResult()
        while source.has_next_line():
            line = source.next_line()
            result.parsed_lines += 1
            line_no = result.parsed_lines

            name, working = _split_label(line, self.settings)
            if name is not None:
                if name in result.labels:
                    logger.debug("Line %d: duplicate label %s", line_no, name)
                    return result, ParseError(
                        line_no,
                        line,
                        [Problem(ErrorKind.DUPLICATE_LABEL, f"The label '{name}' was found twice.")],
                    )
                result.labels[name] = Label(name, len(result.instructions) + 1)
                logger.debug("Line %d: label %s -> %d", line_no, name, len(result.instructions) + 1)

            if not working:
                result.instructions.append(None)
                continue

            tokens = split_tokens(working, self.settings)
            if not tokens:
                result.instructions.append(None)
                continue
            outcome = resolve_instruction(
                self.definitions, tokens[0], tokens[1:], self.settings, line_no, line
            )
            if not isinstance(outcome, ParsedInstruction):
                logger.debug("Line %d: parse failed: %s", line_no, "; ".join(p.message for p in outcome))
                return result, ParseError(line_no, line, outcome)
            result.instructions.append(outcome)

        logger.info(
            "Parsed %d line(s): %d instruction(s), %d label(s)",
            result.parsed_lines,
            result.instruction_count,
            len(result.labels),
        )
        return result, None
