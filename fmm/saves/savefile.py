# fmm/saves/savefile.py
from __future__ import annotations
import logging
import zipfile
import zlib
from dataclasses import dataclass, field
from pathlib import Path

from fmm.core.errors import DatFormatError, SaveFileError
from fmm.dat.propertytree import PropertyTree, PTDict, loadPropertyTree
from fmm.dat.stream import DatReader
from fmm.mods.ident import ModIdent
from fmm.semver.version import ModVersion

logger = logging.getLogger(__name__)

__all__ = ["SaveFile", "READ_SIZE", "readLevelData", "parseSaveHeader"]



# Upper bound on level data read from a save; the header sits at the start.
READ_SIZE = 1_048_576

_COMPRESSED_LEVEL = "level.dat0"
_UNCOMPRESSED_LEVEL = "level.dat"



@dataclass(slots=True)
class SaveFile:
    path: Path
    mapVersion: ModVersion
    scenarioName: str = ""
    scenarioModName: str = ""
    mods: list[ModIdent] = field(default_factory=list)
    startupSettings: PropertyTree = field(default_factory=PTDict)

    @classmethod
    def load(cls, path: Path) -> SaveFile:
        path = Path(path)
        logger.info("Reading save file '%s'", path)
        data = readLevelData(path)
        try:
            return parseSaveHeader(data, path)
        except DatFormatError as err:
            raise SaveFileError(path, str(err)) from err



def _findLevelMember(names: list[str]) -> tuple[str, bool] | None:
    # The compressed variant wins when both are present
    for name in names:
        if _COMPRESSED_LEVEL in name:
            return name, True
    for name in names:
        if _UNCOMPRESSED_LEVEL in name:
            return name, False
    return None



def readLevelData(path: Path) -> bytes:
    """Return at most READ_SIZE bytes of (inflated) level data from a save archive."""
    try:
        with zipfile.ZipFile(path) as archive:
            found = _findLevelMember(archive.namelist())
            if found is None:
                raise SaveFileError(path, "could not locate level.dat or level.dat0")
            memberName, compressed = found

            with archive.open(memberName) as member:
                if not compressed:
                    # Oversized headers are truncated, not rejected
                    return member.read(READ_SIZE)
                raw = member.read()
    except (OSError, zipfile.BadZipFile) as err:
        raise SaveFileError(path, str(err)) from err

    try:
        return zlib.decompressobj().decompress(raw, READ_SIZE)
    except zlib.error as err:
        raise SaveFileError(path, f"could not inflate {memberName}: {err}") from err



def _readModWithCrc(reader: DatReader) -> ModIdent:
    name = reader.string()
    major = reader.u16Optimized()
    minor = reader.u16Optimized()
    patch = reader.u16Optimized()
    # CRC of the mod at save time; not validated
    reader.u32()
    return ModIdent(name, ModVersion(major, minor, patch))



def parseSaveHeader(data: bytes, path: Path) -> SaveFile:
    reader = DatReader(data)

    mapVersion = ModVersion(reader.u16(), reader.u16(), reader.u16(), reader.u16())
    reader.skip(2)

    scenarioName = reader.string()
    scenarioModName = reader.string()

    # Campaign and difficulty flags
    reader.skip(14)

    modCount = reader.u8()
    mods = [_readModWithCrc(reader) for _ in range(modCount)]

    # Startup settings CRC
    reader.skip(4)

    startupSettings = loadPropertyTree(reader)
    logger.debug("Save '%s' uses %d mods (map version %s)", path, len(mods), mapVersion)

    return SaveFile(
        path=path,
        mapVersion=mapVersion,
        scenarioName=scenarioName,
        scenarioModName=scenarioModName,
        mods=mods,
        startupSettings=startupSettings,
    )
