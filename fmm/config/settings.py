# fmm/config/settings.py
from __future__ import annotations
import logging
import os
from pathlib import Path

import json5
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fmm.core.errors import ConfigError
from fmm.mods.ident import ModIdent, parseModIdent

logger = logging.getLogger(__name__)

__all__ = ["FmmConfig", "DEFAULT_CONFIG_PATH", "loadConfig"]



DEFAULT_CONFIG_PATH = Path(os.path.expanduser("~/.config/fmm/fmm.json5"))



class FmmConfig(BaseModel):
    """User configuration, read from a JSON5 file."""
    model_config = ConfigDict(extra="forbid")

    gameDir: Path | None = None
    modsDir: Path | None = None
    # Named mod sets: name -> ["ModName", "OtherMod@1.2.3", ...]
    sets: dict[str, list[str]] = Field(default_factory=dict)
    logFile: Path | None = None
    devMode: bool = False

    def resolveModsDir(self) -> Path:
        """
        The explicit mods directory if it exists, else <gameDir>/mods.
        """
        if self.modsDir is not None:
            if self.modsDir.is_dir():
                return self.modsDir
            raise ConfigError(f"Mods directory '{self.modsDir}' does not exist")
        if self.gameDir is not None:
            candidate = self.gameDir / "mods"
            if candidate.is_dir():
                return candidate
            raise ConfigError(f"Could not find mods directory in game directory '{self.gameDir}'")
        raise ConfigError("Neither a game directory nor a mods directory is configured")

    def modSet(self, name: str) -> list[ModIdent]:
        if name not in self.sets:
            raise ConfigError(f"Mod set '{name}' does not exist")
        try:
            return [parseModIdent(raw) for raw in self.sets[name]]
        except ValueError as err:
            raise ConfigError(f"Invalid entry in mod set '{name}': {err}") from err



def loadConfig(path: Path | None = None) -> FmmConfig:
    """
    Load configuration from `path` (or the default location).

    A missing file yields the defaults; an unreadable or invalid one raises ConfigError.
    """
    configPath = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not configPath.exists():
        logger.debug("No config file at '%s', using defaults", configPath)
        return FmmConfig()
    try:
        raw = json5.loads(configPath.read_text(encoding="utf-8"))
        return FmmConfig.model_validate(raw)
    except (OSError, ValueError, ValidationError) as err:
        raise ConfigError(f"Failed to parse '{configPath}': {err}") from err
