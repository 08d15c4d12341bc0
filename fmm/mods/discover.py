# fmm/mods/discover.py
from __future__ import annotations
import logging
import zipfile
from collections.abc import Mapping
from pathlib import Path
from typing import TypeAlias

from fmm.core.errors import (
    DescriptorNotFoundError,
    DescriptorParseError,
    FilesystemError,
    InvalidModStructureError,
)
from fmm.mods.constants import ARCHIVE_SUFFIXES, INFO_JSON_FILE, RESERVED_FILES
from fmm.mods.dependency import parseModDependency
from fmm.mods.manifest import parseInfoJson
from fmm.mods.types import EnabledKind, EnabledState, ModRecord, ModStructure, ModVersionEntry

logger = logging.getLogger(__name__)

__all__ = [
    "ModMap",
    "classifyEntry",
    "readInfoJsonBytes",
    "loadModEntry",
    "scanModsDirectory",
]

ModMap: TypeAlias = dict[str, ModRecord]

# Failures that only disqualify a single directory entry
_ENTRY_ERRORS = (
    InvalidModStructureError,
    DescriptorNotFoundError,
    DescriptorParseError,
    zipfile.BadZipFile,
    OSError,
)



def classifyEntry(path: Path) -> ModStructure:
    if path.suffix.lower() in ARCHIVE_SUFFIXES:
        return ModStructure.ARCHIVE
    if path.is_symlink():
        return ModStructure.SYMLINK
    if path.is_dir() and (path / INFO_JSON_FILE).is_file():
        return ModStructure.DIRECTORY
    raise InvalidModStructureError(path)



def readInfoJsonBytes(path: Path, structure: ModStructure) -> bytes:
    """Read raw info.json bytes from a package without holding it open past the call."""
    if structure is ModStructure.ARCHIVE:
        with zipfile.ZipFile(path) as archive:
            for member in archive.namelist():
                if INFO_JSON_FILE in member:
                    return archive.read(member)
        raise DescriptorNotFoundError(path)

    infoPath = path / INFO_JSON_FILE
    try:
        return infoPath.read_bytes()
    except FileNotFoundError as err:
        raise DescriptorNotFoundError(path) from err



def loadModEntry(path: Path) -> tuple[str, ModVersionEntry]:
    """
    Build a ModVersionEntry for one directory entry.

    Returns (modName, entry). Structural problems raise the matching FmmError;
    a malformed dependency string raises DependencyParseError.
    """
    structure = classifyEntry(path)
    info = parseInfoJson(readInfoJsonBytes(path, structure), path)
    dependencies = tuple(parseModDependency(raw) for raw in (info.dependencies or []))
    return info.name, ModVersionEntry(
        path=path,
        structure=structure,
        version=info.version,
        dependencies=dependencies,
    )



def scanModsDirectory(
    modsDir: Path,
    enabledStates: Mapping[str, EnabledState] | None = None,
) -> ModMap:
    """
    Returns a mapping:
      modName -> ModRecord

    Entries are visited in file name order. Unreadable or malformed packages
    are logged and skipped; a malformed dependency string aborts the scan.

    enabledStates seeds each record's enabled state by mod name. A pinned
    version that is not installed falls back to LATEST.
    """
    try:
        entries = sorted(modsDir.iterdir(), key=lambda entry: entry.name)
    except OSError as err:
        raise FilesystemError(f"Could not read mods directory '{modsDir}': {err}", path=modsDir) from err

    states = dict(enabledStates or {})
    found: ModMap = {}
    skipped = 0

    for entryPath in entries:
        if entryPath.name in RESERVED_FILES:
            continue

        try:
            name, versionEntry = loadModEntry(entryPath)
        except _ENTRY_ERRORS as err:
            skipped += 1
            logger.warning("Skipping '%s': %s", entryPath.name, err)
            continue

        record = found.get(name)
        if record is None:
            record = ModRecord(name=name, enabled=states.pop(name, EnabledState.disabled()))
            found[name] = record

        if not record.insertVersion(versionEntry):
            existing = record.findVersion(versionEntry.version)
            logger.warning(
                "Duplicate %s v%s at '%s' ignored, keeping '%s'",
                name,
                versionEntry.version,
                entryPath,
                existing.path if existing else "?",
            )
            continue

        logger.debug("Found %s v%s (%s)", name, versionEntry.version, versionEntry.structure.value)

    for record in found.values():
        state = record.enabled
        if state.kind is EnabledKind.VERSION and state.version is not None and record.findVersion(state.version) is None:
            logger.warning(
                "%s is pinned to v%s which is not installed, falling back to latest",
                record.name,
                state.version,
            )
            record.enabled = EnabledState.latest()

    logger.info("Mods discovered: %d (skipped entries: %d) in '%s'", len(found), skipped, modsDir)
    return found
