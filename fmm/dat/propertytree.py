# fmm/dat/propertytree.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias, Union

from fmm.core.errors import DatFormatError
from fmm.dat.stream import DatReader, DatWriter

__all__ = [
    "PTNone", "PTBool", "PTNumber", "PTString", "PTList", "PTDict",
    "PropertyTree",
    "loadPropertyTree", "writePropertyTree",
    "decodePropertyTree", "encodePropertyTree",
    "treeFromPython", "treeToPython",
]



TAG_NONE = 0
TAG_BOOL = 1
TAG_NUMBER = 2
TAG_STRING = 3
TAG_LIST = 4
TAG_DICT = 5



@dataclass(frozen=True, slots=True)
class PTNone:
    pass



@dataclass(frozen=True, slots=True)
class PTBool:
    value: bool



@dataclass(frozen=True, slots=True)
class PTNumber:
    value: float



@dataclass(frozen=True, slots=True)
class PTString:
    # None means "absent", which is not the same as ""
    value: str | None



@dataclass(slots=True)
class PTList:
    items: list[PropertyTree] = field(default_factory=list)

    def get(self, index: int) -> PropertyTree | None:
        if 0 <= index < len(self.items):
            return self.items[index]
        return None



@dataclass(slots=True)
class PTDict:
    # Entry order carries no meaning; equality is by key/value set
    entries: dict[str, PropertyTree] = field(default_factory=dict)

    def get(self, key: str) -> PropertyTree | None:
        return self.entries.get(key)



PropertyTree: TypeAlias = Union[PTNone, PTBool, PTNumber, PTString, PTList, PTDict]



# ------------------------------------------------------------------ #
# Binary codec
# ------------------------------------------------------------------ #

def loadPropertyTree(reader: DatReader) -> PropertyTree:
    """
    Read one property tree value.

    Layout: tag byte, reserved byte, then the payload of the tag:
        0 None        -
        1 Boolean     1 byte
        2 Number      f64
        3 String      tree string
        4 List        u32 count, count x (ignored tree string key, value)
        5 Dictionary  u32 count, count x (tree string key, value)
    """
    tagOffset = reader.pos
    tag = reader.u8()
    # Internal flag with no meaning for us
    reader.skip(1)

    if tag == TAG_NONE:
        return PTNone()
    if tag == TAG_BOOL:
        return PTBool(reader.bool())
    if tag == TAG_NUMBER:
        return PTNumber(reader.f64())
    if tag == TAG_STRING:
        return PTString(reader.treeString())
    if tag == TAG_LIST:
        length = reader.u32()
        items: list[PropertyTree] = []
        for _ in range(length):
            reader.treeString()
            items.append(loadPropertyTree(reader))
        return PTList(items)
    if tag == TAG_DICT:
        length = reader.u32()
        entries: dict[str, PropertyTree] = {}
        for _ in range(length):
            keyOffset = reader.pos
            key = reader.treeString()
            if key is None:
                raise DatFormatError("Missing key in PropertyTree Dictionary", offset=keyOffset)
            entries[key] = loadPropertyTree(reader)
        return PTDict(entries)

    raise DatFormatError(f"Invalid data type in PropertyTree: {tag}", offset=tagOffset)



def writePropertyTree(writer: DatWriter, tree: PropertyTree) -> None:
    if isinstance(tree, PTNone):
        writer.u8(TAG_NONE)
        writer.u8(0)
    elif isinstance(tree, PTBool):
        writer.u8(TAG_BOOL)
        writer.u8(0)
        writer.bool(tree.value)
    elif isinstance(tree, PTNumber):
        writer.u8(TAG_NUMBER)
        writer.u8(0)
        writer.f64(tree.value)
    elif isinstance(tree, PTString):
        writer.u8(TAG_STRING)
        writer.u8(0)
        writer.treeString(tree.value)
    elif isinstance(tree, PTList):
        writer.u8(TAG_LIST)
        writer.u8(0)
        writer.u32(len(tree.items))
        for item in tree.items:
            # List keys are always absent
            writer.treeString(None)
            writePropertyTree(writer, item)
    elif isinstance(tree, PTDict):
        writer.u8(TAG_DICT)
        writer.u8(0)
        writer.u32(len(tree.entries))
        for key, value in tree.entries.items():
            writer.treeString(key)
            writePropertyTree(writer, value)
    else:
        raise TypeError(f"Not a PropertyTree value: {type(tree).__name__}")



def decodePropertyTree(data: bytes) -> PropertyTree:
    return loadPropertyTree(DatReader(data))



def encodePropertyTree(tree: PropertyTree) -> bytes:
    writer = DatWriter()
    writePropertyTree(writer, tree)
    return writer.getvalue()



# ------------------------------------------------------------------ #
# Python conversion
# ------------------------------------------------------------------ #

def treeFromPython(value: Any) -> PropertyTree:
    """
    Convert plain Python data into a PropertyTree.

    None -> PTNone, bool -> PTBool, int/float -> PTNumber, str -> PTString,
    list/tuple -> PTList, mapping -> PTDict. PropertyTree values pass through.
    """
    if isinstance(value, (PTNone, PTBool, PTNumber, PTString, PTList, PTDict)):
        return value
    if value is None:
        return PTNone()
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return PTBool(value)
    if isinstance(value, (int, float)):
        return PTNumber(float(value))
    if isinstance(value, str):
        return PTString(value)
    if isinstance(value, (list, tuple)):
        return PTList([treeFromPython(item) for item in value])
    if isinstance(value, Mapping):
        return PTDict({str(key): treeFromPython(item) for key, item in value.items()})
    raise TypeError(f"Cannot convert {type(value).__name__} to a PropertyTree")



def treeToPython(tree: PropertyTree) -> Any:
    """Inverse of treeFromPython. An absent string becomes None."""
    if isinstance(tree, PTNone):
        return None
    if isinstance(tree, (PTBool, PTNumber, PTString)):
        return tree.value
    if isinstance(tree, PTList):
        return [treeToPython(item) for item in tree.items]
    if isinstance(tree, PTDict):
        return {key: treeToPython(value) for key, value in tree.entries.items()}
    raise TypeError(f"Not a PropertyTree value: {type(tree).__name__}")
