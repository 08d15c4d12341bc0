# fmm/mods/ident.py
from __future__ import annotations

from dataclasses import dataclass

from fmm.semver.version import ModVersion, parseModVersion

__all__ = ["ModIdent", "parseModIdent"]



@dataclass(frozen=True, slots=True)
class ModIdent:
    """A mod name, optionally pinned to an exact version."""
    name: str
    version: ModVersion | None = None

    def __str__(self) -> str:
        return self.name if self.version is None else f"{self.name} v{self.version}"



def parseModIdent(raw: str) -> ModIdent:
    """
    Parse "name" or "name@version" into a ModIdent.

    Examples:
        "Krastorio2"        -> Krastorio2, any version
        "Krastorio2@1.3.4"  -> Krastorio2, exactly 1.3.4
    """
    text = raw.strip()
    parts = text.split("@")
    if len(parts) == 1:
        name, version = parts[0], None
    elif len(parts) == 2:
        name = parts[0]
        try:
            version = parseModVersion(parts[1])
        except (TypeError, ValueError) as err:
            raise ValueError(f"Invalid version identifier in {raw!r}: {err}") from err
    else:
        raise ValueError(f"Incorrect mod format {raw!r} - must be 'Name' or 'Name@Version'")

    name = name.strip()
    if not name:
        raise ValueError(f"Mod identifier {raw!r} has an empty name")
    return ModIdent(name=name, version=version)
