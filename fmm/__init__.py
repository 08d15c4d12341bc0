# fmm/__init__.py
from .mods.catalog import ModCatalog
from .mods.ident import ModIdent, parseModIdent
from .saves.modsettings import ModSettings
from .saves.savefile import SaveFile
from .saves.sync import syncWithSave, syncWithSet

__all__ = [
    "ModCatalog",
    "ModIdent",
    "parseModIdent",
    "ModSettings",
    "SaveFile",
    "syncWithSave",
    "syncWithSet",
]
