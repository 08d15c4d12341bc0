# fmm/mods/catalog.py
from __future__ import annotations
import logging
from collections.abc import Iterable
from pathlib import Path

from fmm.core.errors import (
    CouldNotRemoveVersionError,
    FmmError,
    MatchingDependencyNotFoundError,
    ModDoesNotExistError,
    ModVersionDoesNotExistError,
)
from fmm.mods.constants import BASE_MOD, MOD_LIST_FILE
from fmm.mods.dependency import ModDependency
from fmm.mods.discover import ModMap, loadModEntry, scanModsDirectory
from fmm.mods.ident import ModIdent
from fmm.mods.manifest import ModListEntry, ModListJson, loadModList, writeModList
from fmm.mods.types import EnabledState, ModRecord, ModStructure, ModVersionEntry

logger = logging.getLogger(__name__)

__all__ = ["ModCatalog", "EnableFailure"]

EnableFailure = tuple[ModIdent, FmmError]



class ModCatalog:
    """
    In-memory view of a mods directory.

    Responsibilities:
      - Hold one ModRecord per installed mod, rebuilt from disk on load.
      - Change enabled states, following Required/NoLoadOrder dependencies.
      - Remove installed versions from disk.
      - Persist enabled states back to mod-list.json.
    """

    def __init__(self, modsDir: Path, mods: ModMap, unmanaged: Iterable[ModListEntry] = ()) -> None:
        self.modsDir = modsDir
        self.mods: ModMap = mods
        # mod-list.json entries without an installed package (e.g. "base")
        self._unmanaged: dict[str, ModListEntry] = {entry.name: entry for entry in unmanaged}

    @classmethod
    def load(cls, modsDir: Path) -> ModCatalog:
        modsDir = Path(modsDir)
        modList = loadModList(modsDir / MOD_LIST_FILE)

        enabledStates: dict[str, EnabledState] = {}
        for entry in modList.mods:
            if not entry.enabled:
                enabledStates[entry.name] = EnabledState.disabled()
            elif entry.version is None:
                enabledStates[entry.name] = EnabledState.latest()
            else:
                enabledStates[entry.name] = EnabledState.pinned(entry.version)

        mods = scanModsDirectory(modsDir, enabledStates)
        unmanaged = [entry for entry in modList.mods if entry.name not in mods]
        return cls(modsDir, mods, unmanaged)

    @property
    def modListPath(self) -> Path:
        return self.modsDir / MOD_LIST_FILE

    # ----- Lookup -----

    def get(self, name: str) -> ModRecord:
        record = self.mods.get(name)
        if record is None:
            raise ModDoesNotExistError(name)
        return record

    def contains(self, ident: ModIdent) -> bool:
        record = self.mods.get(ident.name)
        if record is None:
            return False
        return ident.version is None or record.findVersion(ident.version) is not None

    def query(self, ident: ModIdent) -> list[ModVersionEntry]:
        """Installed versions matching the identifier, ascending."""
        record = self.get(ident.name)
        if ident.version is None:
            return list(record.versions)
        entry = record.findVersion(ident.version)
        return [entry] if entry is not None else []

    def activeVersion(self, name: str) -> ModVersionEntry | None:
        return self.get(name).activeVersion()

    # ----- Enabled state -----

    def enableAll(self) -> None:
        logger.info("Enabling latest versions of all mods")
        for record in self.mods.values():
            record.enabled = EnabledState.latest()
        for name in list(self._unmanaged):
            self._unmanaged[name] = ModListEntry(name=name, enabled=True)

    def disableAll(self, includeBaseMod: bool = False) -> None:
        logger.info("Disabling all mods%s", "" if includeBaseMod else " except base")
        for name, record in self.mods.items():
            if includeBaseMod or name != BASE_MOD:
                record.enabled = EnabledState.disabled()
        for name in list(self._unmanaged):
            if includeBaseMod or name != BASE_MOD:
                self._unmanaged[name] = ModListEntry(name=name, enabled=False)

    def disable(self, name: str) -> None:
        record = self.get(name)
        record.enabled = EnabledState.disabled()
        logger.info("Disabled %s", name)

    def enable(self, ident: ModIdent) -> list[ModIdent]:
        """
        Enable one mod and resolve its dependencies against installed versions.

        Returns the dependencies (name + exact version) that still have to be
        enabled. The mod itself stays enabled even when a dependency cannot be
        matched.
        """
        record = self.get(ident.name)

        if ident.version is not None:
            if record.findVersion(ident.version) is None:
                raise ModVersionDoesNotExistError(ident.name, ident.version)
            record.enabled = EnabledState.pinned(ident.version)
        else:
            record.enabled = EnabledState.latest()

        active = record.activeVersion()
        if active is None:
            # A record always has at least one version
            raise ModDoesNotExistError(ident.name)
        logger.info("Enabled %s v%s", ident.name, active.version)

        toEnable: list[ModIdent] = []
        for dependency in active.dependencies:
            if dependency.name == BASE_MOD or not dependency.isActivating:
                continue
            target = self._resolveDependency(ident.name, dependency)
            toEnable.append(ModIdent(dependency.name, target.version))
        return toEnable

    def _resolveDependency(self, modName: str, dependency: ModDependency) -> ModVersionEntry:
        record = self.mods.get(dependency.name)
        if record is None or not record.versions:
            raise MatchingDependencyNotFoundError(modName, dependency)

        if dependency.requirement is None:
            return record.versions[-1]

        for entry in reversed(record.versions):
            if dependency.requirement.matches(entry.version):
                return entry
        raise MatchingDependencyNotFoundError(modName, dependency)

    def enableClosure(self, idents: Iterable[ModIdent]) -> list[EnableFailure]:
        """
        Enable the given mods and, transitively, their dependencies.

        Breadth-first over mod names: each name is enabled at most once, so
        diamonds and cycles terminate. A failing enable only stops that mod's
        own expansion; earlier changes stay applied.

        Returns the (ident, error) pairs that could not be enabled.
        """
        visited: set[str] = set()
        failures: list[EnableFailure] = []
        frontier = list(idents)

        while frontier:
            nextFrontier: list[ModIdent] = []
            for ident in frontier:
                if ident.name in visited:
                    continue
                visited.add(ident.name)
                try:
                    nextFrontier.extend(self.enable(ident))
                except FmmError as err:
                    logger.warning("Could not enable %s: %s", ident, err)
                    failures.append((ident, err))
            frontier = nextFrontier

        return failures

    # ----- Disk mutation -----

    def add(self, path: Path) -> ModIdent:
        """
        Catalog a package that was just placed in the mods directory.

        The mod is added disabled if it was unknown; an existing record keeps
        its state.
        """
        name, entry = loadModEntry(Path(path))
        record = self.mods.get(name)
        if record is None:
            record = ModRecord(name=name)
            self.mods[name] = record
            self._unmanaged.pop(name, None)
        if not record.insertVersion(entry):
            logger.warning("%s v%s is already installed, ignoring '%s'", name, entry.version, path)
        else:
            logger.info("Added %s v%s", name, entry.version)
        return ModIdent(name, entry.version)

    def remove(self, ident: ModIdent) -> ModVersionEntry:
        """Delete one installed version (the highest when no version is given)."""
        record = self.get(ident.name)
        if ident.version is None:
            entry = record.latest()
            if entry is None:
                raise ModDoesNotExistError(ident.name)
        else:
            entry = record.findVersion(ident.version)
            if entry is None:
                raise ModVersionDoesNotExistError(ident.name, ident.version)

        self._deleteVersion(record, entry)
        logger.info("Removed %s v%s", record.name, entry.version)
        return entry

    def dedup(self) -> list[ModIdent]:
        """
        Delete superseded zip packages, keeping the highest version of every mod.

        Directory and symlink installs are never deleted. A failure stops the
        pass; versions deleted before it stay deleted.
        """
        removed: list[ModIdent] = []
        for record in list(self.mods.values()):
            if len(record.versions) < 2:
                continue
            superseded = [
                entry for entry in record.versions[:-1]
                if entry.structure is ModStructure.ARCHIVE
            ]
            for entry in superseded:
                self._deleteVersion(record, entry)
                logger.info("Removed superseded %s v%s", record.name, entry.version)
                removed.append(ModIdent(record.name, entry.version))
        return removed

    def _deleteVersion(self, record: ModRecord, entry: ModVersionEntry) -> None:
        try:
            entry.deleteFromDisk()
        except OSError as err:
            raise CouldNotRemoveVersionError(record.name, entry.version, entry.path, str(err)) from err

        record.versions.remove(entry)
        if record.enabled.version == entry.version:
            record.enabled = EnabledState.latest()
        if not record.versions:
            del self.mods[record.name]

    # ----- Persistence -----

    def toModList(self) -> ModListJson:
        entries: list[ModListEntry] = list(self._unmanaged.values())
        for name, record in self.mods.items():
            state = record.enabled
            entries.append(ModListEntry(name=name, enabled=state.isEnabled, version=state.version))
        entries.sort(key=lambda entry: entry.name.lower())
        return ModListJson(mods=entries)

    def persist(self) -> None:
        writeModList(self.modListPath, self.toModList())
        logger.info("Saved mod list to '%s'", self.modListPath)
