from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

import orjson
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    field_validator,
)

from parse.imports import SUPPRESSION_MARKER
from parse.resolution import DEFAULT_EXTENSIONS

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "arch-rules.json"


def _compile_pattern(pattern: str, field_name: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        msg = f"invalid {field_name} pattern {pattern!r}: {exc}"
        raise ValueError(msg) from exc


class Rule(BaseModel):
    """Architectural boundary rule: files matching scope may not import forbidden."""

    model_config = ConfigDict(extra="forbid")

    scope: str = Field(description="Regex searched in the importing file's identity")
    forbidden: list[str] = Field(
        description="Regexes searched in the resolved target and the raw literal",
    )
    message: str = Field(description="Rationale shown with every violation")

    _scope_re: re.Pattern[str] = PrivateAttr()
    _forbidden_res: tuple[re.Pattern[str], ...] = PrivateAttr()

    @field_validator("scope")
    @classmethod
    def validate_scope(cls, v: str) -> str:
        _compile_pattern(v, "scope")
        return v

    @field_validator("forbidden")
    @classmethod
    def validate_forbidden(cls, v: list[str]) -> list[str]:
        for pattern in v:
            _compile_pattern(pattern, "forbidden")
        return v

    def model_post_init(self, __context: Any) -> None:
        self._scope_re = re.compile(self.scope)
        self._forbidden_res = tuple(re.compile(p) for p in self.forbidden)

    @property
    def scope_pattern(self) -> re.Pattern[str]:
        return self._scope_re

    @property
    def forbidden_patterns(self) -> tuple[re.Pattern[str], ...]:
        return self._forbidden_res


class ArchConfig(BaseModel):
    """Contents of arch-rules.json."""

    model_config = ConfigDict(extra="forbid")

    rules: list[Rule] = Field(
        default_factory=list,
        description="Boundary rules, evaluated in order",
    )
    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="Extensions probed when resolving extensionless imports",
    )
    suppression_marker: str = Field(
        default=SUPPRESSION_MARKER,
        min_length=1,
        description="Token on the line above an import that downgrades violations",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to scan (empty = all supported files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to skip",
    )
    nested_gitignore: bool = Field(
        default=False,
        description="Compose nested .gitignore files instead of the root one only",
    )

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        for ext in v:
            if not ext.startswith(".") or len(ext) < 2:
                msg = f"extension {ext!r} must start with '.'"
                raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Raised when the rule file exists but cannot be parsed or validated."""


def parse_config(data: Any, source: str = "<memory>") -> ArchConfig:
    """Validate an already-decoded rule document."""
    try:
        return ArchConfig.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid config in {source}: {e}"
        raise ConfigError(msg) from e


def load_rules(data: Any) -> list[Rule]:
    """Validate a bare list of rule records."""
    return parse_config({"rules": data}).rules


def load_config(root: Path, config_path: Path | None = None) -> ArchConfig:
    """Load configuration from arch-rules.json if it exists."""
    if config_path is None:
        config_path = root / CONFIG_FILENAME

    if not config_path.is_file():
        logger.debug("no rule file at %s; using defaults", config_path)
        return ArchConfig()

    try:
        data = orjson.loads(config_path.read_bytes())
    except orjson.JSONDecodeError as e:
        msg = f"Invalid JSON in {config_path}: {e}"
        raise ConfigError(msg) from e

    config = parse_config(data, str(config_path))
    logger.debug("loaded %d rule(s) from %s", len(config.rules), config_path)
    return config
