# fmm/saves/modsettings.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path

from fmm.core.errors import CouldNotWriteChangesError, DatFormatError, SettingsError
from fmm.dat.propertytree import PropertyTree, PTDict, loadPropertyTree, writePropertyTree
from fmm.dat.stream import DatReader, DatWriter
from fmm.mods.constants import MOD_SETTINGS_FILE
from fmm.semver.version import ModVersion

logger = logging.getLogger(__name__)

__all__ = ["ModSettings"]



STARTUP_KEY = "startup"



@dataclass(slots=True)
class ModSettings:
    """
    mod-settings.dat: the game version that wrote it, a reserved byte and
    one property tree holding "startup", "runtime-global" and
    "runtime-per-user" dictionaries.
    """
    path: Path
    gameVersion: ModVersion
    settings: PropertyTree

    @classmethod
    def load(cls, modsDir: Path) -> ModSettings:
        return cls.fromFile(Path(modsDir) / MOD_SETTINGS_FILE)

    @classmethod
    def fromFile(cls, path: Path) -> ModSettings:
        try:
            data = path.read_bytes()
        except OSError as err:
            raise SettingsError(f"Could not read '{path}': {err}") from err
        try:
            return cls.fromBytes(path, data)
        except DatFormatError as err:
            raise SettingsError(f"Invalid mod settings '{path}': {err}") from err

    @classmethod
    def fromBytes(cls, path: Path, data: bytes) -> ModSettings:
        reader = DatReader(data)
        gameVersion = ModVersion(reader.u16(), reader.u16(), reader.u16(), reader.u16())
        # Always false
        reader.skip(1)
        return cls(path=path, gameVersion=gameVersion, settings=loadPropertyTree(reader))

    def toBytes(self) -> bytes:
        version = self.gameVersion
        writer = DatWriter()
        writer.u16(version.major)
        writer.u16(version.minor)
        writer.u16(version.patch)
        writer.u16(version.build or 0)
        writer.u8(0)
        writePropertyTree(writer, self.settings)
        return writer.getvalue()

    def startup(self) -> PTDict:
        return _startupOf(self.settings, "mod settings")

    def mergeStartup(self, other: PropertyTree) -> None:
        """
        Copy every startup setting from `other` (a whole settings tree, e.g.
        from a save file) into this file's startup settings, overwriting on
        collision.

        Both trees must hold a "startup" dictionary; the keys copied are the
        ones under `other["startup"]`, not the top-level keys of `other`.
        """
        target = self.startup()
        source = _startupOf(other, "other settings")
        target.entries.update(source.entries)
        logger.info("Merged %d startup settings", len(source.entries))

    def write(self) -> None:
        try:
            self.path.write_bytes(self.toBytes())
        except OSError as err:
            raise CouldNotWriteChangesError(self.path, str(err)) from err
        logger.debug("Wrote mod settings to '%s'", self.path)



def _startupOf(tree: PropertyTree, what: str) -> PTDict:
    if not isinstance(tree, PTDict):
        raise SettingsError(f"{what.capitalize()} are not a dictionary")
    startup = tree.get(STARTUP_KEY)
    if not isinstance(startup, PTDict):
        raise SettingsError(f"{what.capitalize()} have no '{STARTUP_KEY}' dictionary")
    return startup
