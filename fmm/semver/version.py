# fmm/semver/version.py
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Literal

__all__ = [
    "ModVersion",
    "VersionRequirement",
    "parseModVersion",
    "parseVersionRequirement",
]



_VERSION_PART_RE = re.compile(r"^\d+$")
_MAX_PART = 0xFFFFFFFF

VersionOperator = Literal["<", "<=", "=", ">=", ">"]



@total_ordering
@dataclass(frozen=True, slots=True)
class ModVersion:
    major: int
    minor: int
    patch: int
    build: int | None = None

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        return base if self.build is None else f"{base}.{self.build}"

    def _cmpKey(self) -> tuple:
        # A missing build sorts before any build, including build 0
        buildKey = (0,) if self.build is None else (1, self.build)
        return (self.major, self.minor, self.patch, buildKey)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ModVersion):
            return NotImplemented
        return self._cmpKey() < other._cmpKey()



def _parsePart(part: str, raw: str) -> int:
    if not _VERSION_PART_RE.match(part):
        raise ValueError(f"Invalid numeric component {part!r} in version {raw!r}")
    value = int(part)
    if value > _MAX_PART:
        raise ValueError(f"Version component {part!r} in {raw!r} is too large")
    return value



def parseModVersion(raw: str) -> ModVersion:
    """
    Parse a mod version string into ModVersion.

    Accepted forms (examples):
        "0.16"      -> 0.16.0
        "1.2.3"     -> 1.2.3
        "1.2.3.4"   -> 1.2.3 build 4
        "0.13.00"   -> 0.13.0 (leading zeroes are ignored)

    Rejected:
        "1", "1.2.3.4.5", "1..3", "1.x.0", components above 2^32-1
    """
    if not isinstance(raw, str):
        raise TypeError(f"Version string must be a string type, got {type(raw).__name__}")

    text = raw.strip()
    if not text:
        raise ValueError("Version string cannot be empty or whitespace only")

    parts = text.split(".")
    if not 2 <= len(parts) <= 4:
        raise ValueError(
            f"Incorrect number of version parts in {raw!r} - expected 2 to 4, got {len(parts)}"
        )

    numbers = [_parsePart(part, raw) for part in parts]
    if len(numbers) == 2:
        numbers.append(0)

    return ModVersion(*numbers)



@dataclass(frozen=True, slots=True)
class VersionRequirement:
    operator: VersionOperator
    version: ModVersion

    def __str__(self) -> str:
        return f"{self.operator} {self.version}"

    def matches(self, version: ModVersion) -> bool:
        if self.operator == "<":
            return version < self.version
        if self.operator == "<=":
            return version <= self.version
        if self.operator == "=":
            return version == self.version
        if self.operator == ">=":
            return version >= self.version
        if self.operator == ">":
            return version > self.version
        raise ValueError(f"Unknown operator {self.operator!r}")



def parseVersionRequirement(raw: str) -> VersionRequirement:
    """
    Parse a single-operator requirement such as ">= 1.2.0" or "<0.17".

    Whitespace between the operator and the version is optional.
    """
    text = raw.strip()
    for candidate in ("<=", ">=", "<", "=", ">"):
        if text.startswith(candidate):
            versionPart = text[len(candidate):].strip()
            if not versionPart:
                raise ValueError(f"Missing version after operator {candidate!r} in requirement {raw!r}")
            return VersionRequirement(candidate, parseModVersion(versionPart))  # type: ignore[arg-type]
    raise ValueError(f"Invalid version comparator in requirement {raw!r}")
