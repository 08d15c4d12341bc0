# fmm/mods/types.py
from __future__ import annotations
import bisect
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from fmm.mods.dependency import ModDependency
from fmm.semver.version import ModVersion

__all__ = [
    "ModStructure",
    "EnabledKind",
    "EnabledState",
    "ModVersionEntry",
    "ModRecord",
]



class ModStructure(Enum):
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    ARCHIVE = "archive"



class EnabledKind(Enum):
    DISABLED = "disabled"
    LATEST = "latest"
    VERSION = "version"



@dataclass(frozen=True, slots=True)
class EnabledState:
    """
    Enabled state of a mod.

    LATEST floats to the highest installed version at use-time,
    VERSION pins an exact installed version.
    """
    kind: EnabledKind
    version: ModVersion | None = None

    def __post_init__(self) -> None:
        if (self.kind is EnabledKind.VERSION) != (self.version is not None):
            raise ValueError(f"EnabledState {self.kind.value} cannot carry version {self.version}")

    @classmethod
    def disabled(cls) -> EnabledState:
        return cls(EnabledKind.DISABLED)

    @classmethod
    def latest(cls) -> EnabledState:
        return cls(EnabledKind.LATEST)

    @classmethod
    def pinned(cls, version: ModVersion) -> EnabledState:
        return cls(EnabledKind.VERSION, version)

    @property
    def isEnabled(self) -> bool:
        return self.kind is not EnabledKind.DISABLED

    def __str__(self) -> str:
        if self.kind is EnabledKind.VERSION:
            return f"v{self.version}"
        return self.kind.value



@dataclass(frozen=True, slots=True)
class ModVersionEntry:
    """
    One installed package of a mod.

    The entry owns `path`: deleting the path deletes this version.
    """
    path: Path
    structure: ModStructure
    version: ModVersion
    dependencies: tuple[ModDependency, ...] = ()

    def deleteFromDisk(self) -> None:
        # Only real directories are removed recursively; a symlink is removed, never its target
        if self.structure is ModStructure.DIRECTORY:
            shutil.rmtree(self.path)
        else:
            self.path.unlink()



@dataclass(slots=True)
class ModRecord:
    name: str
    # Always sorted ascending by version, without duplicates
    versions: list[ModVersionEntry] = field(default_factory=list)
    enabled: EnabledState = field(default_factory=EnabledState.disabled)

    def insertVersion(self, entry: ModVersionEntry) -> bool:
        """Insert keeping the order. Returns False if this version is already present."""
        index = bisect.bisect_left(self.versions, entry.version, key=lambda existing: existing.version)
        if index < len(self.versions) and self.versions[index].version == entry.version:
            return False
        self.versions.insert(index, entry)
        return True

    def findVersion(self, version: ModVersion) -> ModVersionEntry | None:
        index = bisect.bisect_left(self.versions, version, key=lambda existing: existing.version)
        if index < len(self.versions) and self.versions[index].version == version:
            return self.versions[index]
        return None

    def latest(self) -> ModVersionEntry | None:
        return self.versions[-1] if self.versions else None

    def activeVersion(self) -> ModVersionEntry | None:
        """The version the game would load, or None when disabled."""
        if self.enabled.kind is EnabledKind.DISABLED:
            return None
        if self.enabled.kind is EnabledKind.LATEST or self.enabled.version is None:
            return self.latest()
        return self.findVersion(self.enabled.version)
