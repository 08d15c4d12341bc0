# fmm/core/errors.py
from __future__ import annotations

from pathlib import Path

__all__ = [
    "FmmError",
    # Structural
    "InvalidModStructureError",
    "DescriptorNotFoundError",
    "DescriptorParseError",
    # Referential
    "ModDoesNotExistError",
    "ModVersionDoesNotExistError",
    "MatchingDependencyNotFoundError",
    # Filesystem
    "FilesystemError",
    "CouldNotRemoveVersionError",
    "CouldNotWriteChangesError",
    # Format
    "DatFormatError",
    "DependencyParseError",
    "ManifestError",
    "SaveFileError",
    "SettingsError",
    "ConfigError",
]



class FmmError(Exception):
    """Base class for every error raised by fmm."""
    pass



# ------------------------------------------------------------------ #
# Structural
# ------------------------------------------------------------------ #

class InvalidModStructureError(FmmError):
    """Raised when a mods directory entry is not a zip, a symlink or a directory with info.json."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Invalid mod structure at '{path}'")
        self.path = path



class DescriptorNotFoundError(FmmError):
    """Raised when a mod package has no info.json."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Could not find info.json in '{path}'")
        self.path = path



class DescriptorParseError(FmmError):
    """Raised when info.json could not be read or does not match the expected shape."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Could not parse info.json of '{path}': {reason}")
        self.path = path
        self.reason = reason



# ------------------------------------------------------------------ #
# Referential
# ------------------------------------------------------------------ #

class ModDoesNotExistError(FmmError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Mod '{name}' does not exist")
        self.name = name



class ModVersionDoesNotExistError(FmmError):
    def __init__(self, name: str, version: object) -> None:
        super().__init__(f"Version {version} of mod '{name}' does not exist")
        self.name = name
        self.version = version



class MatchingDependencyNotFoundError(FmmError):
    """Raised when no installed version satisfies a dependency of the mod being enabled."""

    def __init__(self, modName: str, dependency: object) -> None:
        super().__init__(f"Could not find a matching installed version for dependency '{dependency}' of '{modName}'")
        self.modName = modName
        self.dependency = dependency



# ------------------------------------------------------------------ #
# Filesystem
# ------------------------------------------------------------------ #

class FilesystemError(FmmError):
    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path



class CouldNotRemoveVersionError(FilesystemError):
    def __init__(self, name: str, version: object, path: Path, reason: str) -> None:
        super().__init__(f"Could not remove {name} v{version} at '{path}': {reason}", path=path)
        self.name = name
        self.version = version



class CouldNotWriteChangesError(FilesystemError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Could not write changes to '{path}': {reason}", path=path)



# ------------------------------------------------------------------ #
# Format
# ------------------------------------------------------------------ #

class DatFormatError(FmmError):
    """Raised when binary .dat data is truncated or malformed."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        if offset is not None:
            message = f"{message} (at offset 0x{offset:X})"
        super().__init__(message)
        self.offset = offset



class DependencyParseError(FmmError):
    def __init__(self, raw: str, reason: str = "Invalid dependency string") -> None:
        super().__init__(f"{reason}: {raw!r}")
        self.raw = raw



class ManifestError(FmmError):
    """Raised when mod-list.json is missing or corrupt."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Could not read mod list '{path}': {reason}")
        self.path = path



class SaveFileError(FmmError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Invalid save file '{path}': {reason}")
        self.path = path



class SettingsError(FmmError):
    pass



class ConfigError(FmmError):
    pass
