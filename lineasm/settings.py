from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Pattern, Union

logger = logging.getLogger(__name__)


class LineAsmError(Exception):
    """Base class for every error raised by lineasm."""


class ConfigurationError(LineAsmError):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


Rule = Union[str, Pattern[str]]

DEFAULT_SEPARATOR = r"[^,\s]+"
DEFAULT_LABEL = r"^([A-Za-z_][\w.]*):\s*(.*)$"
DEFAULT_COMMENT = r"\s*[;#].*$"
DEFAULT_SYNTAX: Mapping[str, str] = MappingProxyType({
    "imm": r"^-?(?:0[xX][0-9A-Fa-f]+|\d+)$",
    "reg": r"^[A-Za-z_]\w*$",
    "label": r"^[A-Za-z_][\w.]*$",
})

SETTING_KEYS = ("separator", "label", "comment", "syntax")


def compile_rule(rule: Rule, name: str) -> Pattern[str]:
    if isinstance(rule, re.Pattern):
        return rule
    if not isinstance(rule, str):
        raise ConfigurationError(f"Rule '{name}' must be a regular expression string.")
    try:
        return re.compile(rule)
    except re.error as exc:
        raise ConfigurationError(f"Invalid pattern for '{name}': {exc}") from exc


@dataclass(frozen=True)
class Settings:
    """Parser configuration.

    Fields left as ``None`` fall back to the defaults when the settings are
    resolved. ``label=False`` turns label detection off.
    """

    separator: Optional[Rule] = None
    label: Union[Rule, bool, None] = None
    comment: Optional[Rule] = None
    syntax: Optional[Mapping[str, Rule]] = None

    def resolve(self) -> "Settings":
        separator = self.separator if self.separator is not None else DEFAULT_SEPARATOR
        label = self.label if self.label is not None else DEFAULT_LABEL
        comment = self.comment if self.comment is not None else DEFAULT_COMMENT
        syntax = self.syntax if self.syntax is not None else DEFAULT_SYNTAX

        if label is True:
            label = DEFAULT_LABEL
        if not isinstance(syntax, Mapping):
            raise ConfigurationError("syntax must be a mapping of operand type to pattern.")

        compiled_label: Union[Pattern[str], bool] = False
        if label is not False:
            compiled_label = compile_rule(label, "label")
            if compiled_label.groups < 2:
                raise ConfigurationError("label pattern needs two groups: name and remainder.")

        return Settings(
            separator=compile_rule(separator, "separator"),
            label=compiled_label,
            comment=compile_rule(comment, "comment"),
            syntax=MappingProxyType(
                {str(key): compile_rule(rule, f"syntax.{key}") for key, rule in syntax.items()}
            ),
        )

    def rule_for(self, operand_type: str) -> Pattern[str]:
        syntax = self.syntax if self.syntax is not None else {}
        rule = syntax.get(operand_type)
        if rule is None:
            raise ConfigurationError(f"No syntax rule for operand type '{operand_type}'.")
        return compile_rule(rule, f"syntax.{operand_type}")

    @property
    def labels_enabled(self) -> bool:
        return self.label is not False


DEFAULT_SETTINGS = Settings().resolve()


def resolve_settings(overrides: Union[Settings, Mapping[str, object], None] = None) -> Settings:
    if overrides is None:
        return DEFAULT_SETTINGS
    if isinstance(overrides, Settings):
        return overrides.resolve()
    if not isinstance(overrides, Mapping):
        raise ConfigurationError("Settings must be a Settings instance or a mapping.")
    unknown = sorted(set(overrides) - set(SETTING_KEYS))
    if unknown:
        raise ConfigurationError(f"Unknown settings: {', '.join(unknown)}")
    return replace(Settings(), **dict(overrides)).resolve()


def load_settings(path: Path | str) -> Settings:
    """Read settings from a JSON object with the same keys as ``Settings``.

    Patterns are strings; ``label`` may also be ``false``. Keys that are
    absent fall back to the defaults.
    """
    source = Path(path).expanduser()
    try:
        text = source.read_text(encoding="utf-8-sig")
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Settings file not found: {source}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Failed to read settings {source}: {exc}") from exc
    settings = _validate_settings(text, source).resolve()
    logger.debug("Loaded settings from %s", source)
    return settings


def _validate_settings(text: str, source: Path) -> Settings:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {source}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError("Settings file must contain a JSON object.")
    unknown = sorted(set(data) - set(SETTING_KEYS))
    if unknown:
        raise ConfigurationError(f"Unknown settings: {', '.join(unknown)}")
    for key in ("separator", "comment"):
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigurationError(f"{key} must be a string.")
    label = data.get("label")
    if label is not None and not isinstance(label, (str, bool)):
        raise ConfigurationError("label must be a string or a boolean.")
    syntax = data.get("syntax")
    if syntax is not None:
        if not isinstance(syntax, dict):
            raise ConfigurationError("syntax must be an object.")
        for key, value in syntax.items():
            if not isinstance(value, str):
                raise ConfigurationError(f"syntax.{key} must be a string.")
    return Settings(**{field.name: data.get(field.name) for field in fields(Settings)})
