# fmm/saves/sync.py
from __future__ import annotations
import logging
from collections.abc import Iterable

from fmm.dat.propertytree import PTNone
from fmm.mods.catalog import EnableFailure, ModCatalog
from fmm.mods.constants import BASE_MOD
from fmm.mods.ident import ModIdent
from fmm.saves.modsettings import ModSettings
from fmm.saves.savefile import SaveFile

logger = logging.getLogger(__name__)

__all__ = ["syncWithSave", "syncWithSet"]



def syncWithSet(catalog: ModCatalog, idents: Iterable[ModIdent]) -> list[EnableFailure]:
    """
    Make exactly the given mods (and their dependencies) active.

    Every mod except base is disabled first, then the closure is enabled and
    the mod list persisted, even if some mods could not be enabled.
    """
    wanted = [ident for ident in idents if ident.name != BASE_MOD]
    catalog.disableAll(includeBaseMod=False)
    failures = catalog.enableClosure(wanted)
    catalog.persist()
    if failures:
        logger.warning("Synced with %d failures: %s", len(failures), ", ".join(str(ident) for ident, _ in failures))
    else:
        logger.info("Synced %d mods", len(wanted))
    return failures



def syncWithSave(
    catalog: ModCatalog,
    saveFile: SaveFile,
    settings: ModSettings | None = None,
) -> list[EnableFailure]:
    """
    Activate the mods a save was made with, at the exact versions it recorded.

    When `settings` is given, the save's startup settings are merged into it
    and written back before touching the mod list. A save without startup
    settings leaves the settings file untouched.
    """
    if settings is not None and isinstance(saveFile.startupSettings, PTNone):
        logger.info("Save '%s' has no startup settings, nothing to merge", saveFile.path)
    elif settings is not None:
        settings.mergeStartup(saveFile.startupSettings)
        settings.write()
    return syncWithSet(catalog, saveFile.mods)
