# fmm/mods/dependency.py
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from fmm.core.errors import DependencyParseError
from fmm.semver.version import VersionRequirement, parseVersionRequirement

__all__ = ["DependencyKind", "ModDependency", "parseModDependency"]



_DEPENDENCY_RE = re.compile(
    r"^ *(?:(?P<kind>[!?~]|\(\?\)) *)?"
    # Words are separated by spaces
    r"(?P<name>[a-zA-Z0-9_-]+(?: +[a-zA-Z0-9_-]+)*)"
    r"(?: *(?P<requirement>[<>=]=? *(?:\d+\.){1,2}\d+))? *$"
)



class DependencyKind(Enum):
    REQUIRED = ""
    INCOMPATIBLE = "!"
    OPTIONAL = "?"
    OPTIONAL_HIDDEN = "(?)"
    NO_LOAD_ORDER = "~"



_KINDS_BY_PREFIX: dict[str | None, DependencyKind] = {
    None: DependencyKind.REQUIRED,
    "!": DependencyKind.INCOMPATIBLE,
    "?": DependencyKind.OPTIONAL,
    "(?)": DependencyKind.OPTIONAL_HIDDEN,
    "~": DependencyKind.NO_LOAD_ORDER,
}



@dataclass(frozen=True, slots=True)
class ModDependency:
    kind: DependencyKind
    name: str
    requirement: VersionRequirement | None = None

    @property
    def isActivating(self) -> bool:
        """True for dependencies that must be enabled alongside the mod."""
        return self.kind in (DependencyKind.REQUIRED, DependencyKind.NO_LOAD_ORDER)

    def __str__(self) -> str:
        prefix = f"{self.kind.value} " if self.kind is not DependencyKind.REQUIRED else ""
        suffix = f" {self.requirement}" if self.requirement is not None else ""
        return f"{prefix}{self.name}{suffix}"



def parseModDependency(raw: str) -> ModDependency:
    """
    Parse one dependency line from info.json.

    Grammar:
        [prefix] name [operator version]

    Examples:
        "base >= 1.1"           -> required base, >= 1.1.0
        "? bobplates"           -> optional
        "(?) hidden-mod"        -> optional, hidden
        "! incompatible-mod"    -> incompatible
        "~ Krastorio2 >= 1.3.0" -> required, does not affect load order
    """
    if not isinstance(raw, str):
        raise DependencyParseError(repr(raw), "Dependency must be a string")

    mtch = _DEPENDENCY_RE.match(raw)
    if mtch is None:
        raise DependencyParseError(raw)

    prefix = mtch.group("kind")
    kind = _KINDS_BY_PREFIX.get(prefix)
    if kind is None:
        raise DependencyParseError(raw, f"Unknown dependency modifier {prefix!r}")

    name = mtch.group("name").strip()
    if not name:
        raise DependencyParseError(raw, "Dependency name could not be parsed")

    requirement: VersionRequirement | None = None
    rawRequirement = mtch.group("requirement")
    if rawRequirement is not None:
        try:
            requirement = parseVersionRequirement(rawRequirement)
        except ValueError as err:
            raise DependencyParseError(raw, f"Invalid dependency version requirement ({err})") from err

    return ModDependency(kind=kind, name=name, requirement=requirement)
