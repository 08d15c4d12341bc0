# fmm/mods/constants.py
from __future__ import annotations

__all__ = [
    "MOD_LIST_FILE", "MOD_SETTINGS_FILE", "INFO_JSON_FILE",
    "ARCHIVE_SUFFIXES", "RESERVED_FILES", "BASE_MOD",
]



# Files the game keeps in the mods directory next to the packages.
MOD_LIST_FILE = "mod-list.json"
MOD_SETTINGS_FILE = "mod-settings.dat"
RESERVED_FILES = frozenset({MOD_LIST_FILE, MOD_SETTINGS_FILE})

# Descriptor file at a package root or inside its archive.
INFO_JSON_FILE = "info.json"

ARCHIVE_SUFFIXES = frozenset({".zip"})

# The game's own content; never installed in the mods directory, never a dependency target.
BASE_MOD = "base"
