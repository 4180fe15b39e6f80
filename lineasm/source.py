from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional

from lineasm.settings import LineAsmError, Settings, resolve_settings

logger = logging.getLogger(__name__)


class SourceUnavailable(LineAsmError):
    def __init__(self, message: str, path: Path | str) -> None:
        super().__init__(message)
        self.message = message
        self.path = str(path)


class SourceExhausted(LineAsmError):
    pass


class LineSource:
    """Forward-only sequence of normalized source lines."""

    line_no = 0

    def has_next_line(self) -> bool:
        raise NotImplementedError

    def next_line(self) -> str:
        raise NotImplementedError

    def __iter__(self) -> Iterator[str]:
        while self.has_next_line():
            yield self.next_line()


class StringSource(LineSource):
    def __init__(self, text: str, settings: Optional[Settings] = None) -> None:
        self.text = text
        self.settings = resolve_settings(settings)
        self.cursor = 0
        self.line_no = 0

    def has_next_line(self) -> bool:
        return self.cursor < len(self.text)

    def next_line(self) -> str:
        if not self.has_next_line():
            raise SourceExhausted("No more lines in source.")
        text = self.text
        end = self.cursor
        while end < len(text) and text[end] not in "\r\n":
            end += 1
        raw = text[self.cursor:end]
        if text.startswith("\r\n", end):
            end += 2
        elif end < len(text):
            end += 1
        self.cursor = end
        self.line_no += 1
        return self._normalize(raw)

    def _normalize(self, raw: str) -> str:
        comment = self.settings.comment
        if comment is not None:
            raw = comment.sub("", raw)
        return raw.strip()


class FileSource(StringSource):
    def __init__(self, path: Path | str, settings: Optional[Settings] = None) -> None:
        self.path = Path(path)
        try:
            text = self.path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceUnavailable(f"Cannot read source file {self.path}: {exc}", self.path) from exc
        logger.debug("Read %d characters from %s", len(text), self.path)
        super().__init__(text, settings)


def string_tokenizer(text: str, settings: Optional[Settings] = None) -> StringSource:
    return StringSource(text, settings)


def file_tokenizer(path: Path | str, settings: Optional[Settings] = None) -> FileSource:
    return FileSource(path, settings)
