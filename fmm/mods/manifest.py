# fmm/mods/manifest.py
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any

import json5
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fmm.core.errors import CouldNotWriteChangesError, DescriptorParseError, ManifestError
from fmm.semver.version import ModVersion, parseModVersion

logger = logging.getLogger(__name__)

__all__ = [
    "InfoJson",
    "ModListEntry",
    "ModListJson",
    "parseInfoJson",
    "loadModList",
    "writeModList",
]



def _coerceVersion(value: Any) -> Any:
    if isinstance(value, str):
        return parseModVersion(value)
    return value



class InfoJson(BaseModel):
    """Represents the info.json descriptor shipped with every mod."""
    model_config = ConfigDict(extra="ignore", arbitrary_types_allowed=True)

    name: str
    version: ModVersion
    dependencies: list[str] | None = None

    @field_validator("version", mode="before")
    @classmethod
    def parseVersion(cls, value: Any) -> Any:
        return _coerceVersion(value)



class ModListEntry(BaseModel):
    """One entry of mod-list.json."""
    model_config = ConfigDict(extra="ignore", arbitrary_types_allowed=True)

    name: str
    enabled: bool
    version: ModVersion | None = None

    @field_validator("version", mode="before")
    @classmethod
    def parseVersion(cls, value: Any) -> Any:
        return _coerceVersion(value)

    def toJsonDict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.version is not None:
            data["version"] = str(self.version)
        data["enabled"] = self.enabled
        return data



class ModListJson(BaseModel):
    """Represents mod-list.json, the persisted enabled state of the mods directory."""
    model_config = ConfigDict(extra="ignore")

    mods: list[ModListEntry] = Field(default_factory=list)

    def toJsonDict(self) -> dict[str, Any]:
        return {"mods": [entry.toJsonDict() for entry in self.mods]}



def parseInfoJson(raw: bytes, source: Path) -> InfoJson:
    """
    Parse info.json contents.

    The game does not guarantee UTF-8 in info.json, so every non-ASCII byte is
    dropped before parsing.
    """
    text = bytes(byte for byte in raw if byte < 0x80).decode("ascii")
    try:
        data = json5.loads(text)
    except ValueError as err:
        raise DescriptorParseError(source, str(err)) from err
    try:
        return InfoJson.model_validate(data)
    except ValidationError as err:
        raise DescriptorParseError(source, str(err)) from err



def loadModList(path: Path) -> ModListJson:
    if not path.exists():
        raise ManifestError(path, "file does not exist")
    try:
        raw = json5.loads(path.read_text(encoding="utf-8"))
        return ModListJson.model_validate(raw)
    except (OSError, ValueError, ValidationError) as err:
        raise ManifestError(path, str(err)) from err



def writeModList(path: Path, modList: ModListJson) -> None:
    try:
        path.write_text(json.dumps(modList.toJsonDict(), indent=2) + "\n", encoding="utf-8")
    except OSError as err:
        raise CouldNotWriteChangesError(path, str(err)) from err
    logger.debug("Wrote %d entries to '%s'", len(modList.mods), path)
