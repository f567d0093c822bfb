"""Settings management for assembly-closure.

Scope-aware YAML settings. Scope priority (most specific wins):
1. local (.assembly-closure/settings.local.yaml) - machine-specific
2. project (.assembly-closure/settings.yaml) - committed, team-shared
3. global (~/.assembly-closure/settings.yaml) - user defaults

All keys live under a ``closure:`` section. The logging keys can also be
set with ASSEMBLY_CLOSURE_LOG_LEVEL and ASSEMBLY_CLOSURE_LOG_PATH.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import ValidationError
from pydantic import field_validator

logger = logging.getLogger(__name__)

ENV_LOG_LEVEL = "ASSEMBLY_CLOSURE_LOG_LEVEL"
ENV_LOG_PATH = "ASSEMBLY_CLOSURE_LOG_PATH"


class ClosureSettings(BaseModel):
    """Validated closure settings.

    Attributes:
        module_extension: Extension of module files in platform directories
        symbol_extension: Extension of companion debug-symbol files
        log_level: Logging level name
        log_path: Optional JSONL log file
    """

    module_extension: str = ".dll"
    symbol_extension: str = ".pdb"
    log_level: str = "WARNING"
    log_path: str | None = None

    @field_validator("module_extension", "symbol_extension")
    @classmethod
    def _dotted(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("extension must not be empty")
        return value if value.startswith(".") else f".{value}"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level '{value}'")
        return value


@dataclass
class SettingsPaths:
    """Standard paths for settings files."""

    global_settings: Path
    project_settings: Path
    local_settings: Path

    @classmethod
    def default(cls) -> SettingsPaths:
        """Create default paths for the standard layout."""
        return cls(
            global_settings=Path.home() / ".assembly-closure" / "settings.yaml",
            project_settings=Path.cwd() / ".assembly-closure" / "settings.yaml",
            local_settings=Path.cwd() / ".assembly-closure" / "settings.local.yaml",
        )


class AppSettings:
    """Settings loader with scope-aware merging.

    Usage:
        settings = AppSettings().load()
        settings.symbol_extension  # ".pdb"
    """

    def __init__(self, paths: SettingsPaths | None = None) -> None:
        self.paths = paths or SettingsPaths.default()

    def get_merged_settings(self) -> dict[str, Any]:
        """Load and merge the ``closure`` section from all scopes."""
        result: dict[str, Any] = {}
        for path in [self.paths.global_settings, self.paths.project_settings, self.paths.local_settings]:
            if not path.exists():
                continue
            try:
                with open(path) as f:
                    content = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Skipping unreadable settings file {path}: {e}")
                continue

            section = content.get("closure") if isinstance(content, dict) else None
            if isinstance(section, dict):
                result.update(section)
        return result

    def load(self, environ: dict[str, str] | None = None) -> ClosureSettings:
        """Build validated settings, applying environment overrides.

        Args:
            environ: Environment mapping (defaults to os.environ)

        Returns:
            ClosureSettings
        """
        environ = os.environ if environ is None else environ
        merged = self.get_merged_settings()

        if level := environ.get(ENV_LOG_LEVEL):
            merged["log_level"] = level
        if path := environ.get(ENV_LOG_PATH):
            merged["log_path"] = path

        try:
            return ClosureSettings(**merged)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid settings: {e.error_count()} error(s)")
            return ClosureSettings()
