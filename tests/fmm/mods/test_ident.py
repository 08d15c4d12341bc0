# tests/fmm/mods/test_ident.py
import pytest

from fmm.mods.ident import ModIdent, parseModIdent
from fmm.semver.version import ModVersion


def test_parse_name_only():
    assert parseModIdent("Krastorio2") == ModIdent("Krastorio2")


def test_parse_name_and_version():
    assert parseModIdent("Krastorio2@1.3.4") == ModIdent("Krastorio2", ModVersion(1, 3, 4))


@pytest.mark.parametrize("raw", ["", "@1.0.0", "a@b@c", "mod@", "mod@1", "mod@latest"])
def test_parse_invalid(raw):
    with pytest.raises(ValueError):
        parseModIdent(raw)


def test_str():
    assert str(ModIdent("flib")) == "flib"
    assert str(ModIdent("flib", ModVersion(0, 12, 9))) == "flib v0.12.9"
