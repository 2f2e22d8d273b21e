from typing import Any, Dict, Final, Optional, Union
from enum import Enum
from os import PathLike
from pathlib import Path
import os
import re

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic import field_validator, model_validator


# Variable replacement pattern.
# Supports:
#   - ${NAME}
#   - ${env:NAME}
# Ignores '$${NAME}' so it can be used to escape a literal '${NAME}'.
VAR_PATTERN = re.compile(
    r"(?<!\$)\$\{([A-Za-z_][A-Za-z0-9_]*(?::[A-Za-z_][A-Za-z0-9_]*)?)\}"
)
ESCAPED_VAR_PATTERN = re.compile(r"\$\$\{")

SETTINGS_SECTION: Final[str] = "richinput"
VARIABLES_KEY: Final[str] = "variables"

# Characters that may appear in a query of either trigger kind
QUERY_CHARS: Final[re.Pattern[str]] = re.compile(r"[a-zA-Z0-9_+\-]")


class SettingsError(ValueError):
    pass


class LogLevel(str, Enum):
    debug = "debug"
    info = "info"
    warning = "warning"
    error = "error"
    critical = "critical"


class InputSettings(BaseModel):
    enable_mentions: bool = True
    enable_emojis: bool = True
    enable_auto_links: bool = True
    mention_trigger: str = "@"
    emoji_trigger: str = ":"
    # Number of popup entries visible at once
    max_visible_items: int = Field(default=5, ge=1)
    log_level: LogLevel = LogLevel.info
    log_file: Optional[str] = None

    @field_validator("mention_trigger", "emoji_trigger")
    @classmethod
    def validate_trigger(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("trigger must be a single character")
        if v.isspace() or QUERY_CHARS.fullmatch(v):
            raise ValueError(f"trigger {v!r} cannot be whitespace or a query character")
        return v

    @model_validator(mode="after")
    def validate_distinct_triggers(self) -> "InputSettings":
        if self.mention_trigger == self.emoji_trigger:
            raise ValueError("mention_trigger and emoji_trigger must differ")
        return self


def _lookup_var_value(name: str, vars_map: Dict[str, Any]) -> tuple[bool, Any]:
    """
    Resolve a variable or environment-backed placeholder name.

    Supports:
      - NAME      -> from vars_map, falling back to the environment
      - env:NAME  -> from environment (raw string)

    Returns (found, value); callers leave the placeholder unchanged when
    found is False.
    """
    if name.startswith("env:"):
        env_name = name[4:]
        val = os.getenv(env_name)
        if val is None:
            return False, None
        return True, val

    if name in vars_map:
        return True, vars_map[name]
    val = os.getenv(name)
    if val is None:
        return False, None
    return True, val


def _interpolate(value: Any, vars_map: Dict[str, Any]) -> Any:
    if isinstance(value, dict):
        return {k: _interpolate(v, vars_map) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate(v, vars_map) for v in value]
    if not isinstance(value, str):
        return value

    # A full-match reference keeps the variable's own type
    m = VAR_PATTERN.fullmatch(value)
    if m is not None:
        found, resolved = _lookup_var_value(m.group(1), vars_map)
        return resolved if found else value

    def _sub(match: "re.Match[str]") -> str:
        found, resolved = _lookup_var_value(match.group(1), vars_map)
        if not found:
            return match.group(0)
        return str(resolved)

    out = VAR_PATTERN.sub(_sub, value)
    return ESCAPED_VAR_PATTERN.sub("${", out)


def parse_settings(doc: Optional[Dict[str, Any]]) -> InputSettings:
    if doc is None:
        return InputSettings()
    if not isinstance(doc, dict):
        raise SettingsError("settings document must be a mapping")

    vars_map = doc.get(VARIABLES_KEY) or {}
    if not isinstance(vars_map, dict):
        raise SettingsError(f"'{VARIABLES_KEY}' must be a mapping")

    section = doc.get(SETTINGS_SECTION, doc)
    if section is None:
        section = {}
    if not isinstance(section, dict):
        raise SettingsError(f"'{SETTINGS_SECTION}' must be a mapping")
    section = {k: v for k, v in section.items() if k != VARIABLES_KEY}

    try:
        return InputSettings.model_validate(_interpolate(section, vars_map))
    except ValidationError as exc:
        raise SettingsError(str(exc)) from exc


def load_settings(path: Union[str, PathLike, None] = None) -> InputSettings:
    if path is None:
        return InputSettings()
    p = Path(path)
    try:
        raw = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise SettingsError(f"Cannot read settings file '{p}': {exc}") from exc
    try:
        # JSON documents are valid YAML
        doc = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise SettingsError(f"Invalid settings file '{p}': {exc}") from exc
    return parse_settings(doc)
