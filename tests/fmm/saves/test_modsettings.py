# tests/fmm/saves/test_modsettings.py
import pytest

from fmm.core.errors import SettingsError
from fmm.dat.propertytree import PTBool, PTDict, PTNumber, PTString, encodePropertyTree
from fmm.saves.modsettings import ModSettings
from fmm.semver.version import ModVersion


def settingsTree(startup: dict) -> PTDict:
    return PTDict({
        "startup": PTDict(startup),
        "runtime-global": PTDict({"g": PTDict({"value": PTNumber(1.0)})}),
        "runtime-per-user": PTDict(),
    })


def settingsBytes(tree) -> bytes:
    # 1.1.110.0, reserved byte
    return b"\x01\x00\x01\x00\x6e\x00\x00\x00" + b"\x00" + encodePropertyTree(tree)


def test_load_from_mods_dir(modsDir):
    tree = settingsTree({"a-setting": PTDict({"value": PTBool(False)})})
    (modsDir / "mod-settings.dat").write_bytes(settingsBytes(tree))

    settings = ModSettings.load(modsDir)

    assert settings.path == modsDir / "mod-settings.dat"
    assert settings.gameVersion == ModVersion(1, 1, 110, 0)
    assert settings.settings == tree
    assert settings.startup() == PTDict({"a-setting": PTDict({"value": PTBool(False)})})


def test_to_bytes_reproduces_file(tmp_path):
    data = settingsBytes(settingsTree({"x": PTDict({"value": PTString("hi")})}))
    settings = ModSettings.fromBytes(tmp_path / "mod-settings.dat", data)
    assert settings.toBytes() == data


def test_merge_startup_overwrites_and_keeps_others(tmp_path):
    settings = ModSettings(
        path=tmp_path / "mod-settings.dat",
        gameVersion=ModVersion(1, 1, 110, 0),
        settings=settingsTree({
            "keep": PTDict({"value": PTBool(True)}),
            "shared": PTDict({"value": PTNumber(1.0)}),
        }),
    )
    fromSave = PTDict({"startup": PTDict({
        "shared": PTDict({"value": PTNumber(5.0)}),
        "new": PTDict({"value": PTString("x")}),
    })})

    settings.mergeStartup(fromSave)

    assert settings.startup() == PTDict({
        "keep": PTDict({"value": PTBool(True)}),
        "shared": PTDict({"value": PTNumber(5.0)}),
        "new": PTDict({"value": PTString("x")}),
    })
    assert settings.settings.get("runtime-global") == PTDict({"g": PTDict({"value": PTNumber(1.0)})})


def test_merge_startup_requires_dictionaries(tmp_path):
    settings = ModSettings(tmp_path / "s.dat", ModVersion(1, 1, 0, 0), settingsTree({}))
    with pytest.raises(SettingsError):
        settings.mergeStartup(PTDict({"runtime-global": PTDict()}))
    with pytest.raises(SettingsError):
        settings.mergeStartup(PTNumber(1.0))

    broken = ModSettings(tmp_path / "s.dat", ModVersion(1, 1, 0, 0), PTDict({"startup": PTBool(True)}))
    with pytest.raises(SettingsError):
        broken.mergeStartup(PTDict({"startup": PTDict()}))


def test_write_then_load(modsDir):
    settings = ModSettings(
        path=modsDir / "mod-settings.dat",
        gameVersion=ModVersion(1, 1, 100, 3),
        settings=settingsTree({"s": PTDict({"value": PTNumber(2.5)})}),
    )
    settings.write()

    loaded = ModSettings.load(modsDir)
    assert loaded.gameVersion == ModVersion(1, 1, 100, 3)
    assert loaded.settings == settings.settings


def test_missing_or_corrupt_file(modsDir):
    with pytest.raises(SettingsError):
        ModSettings.load(modsDir)
    (modsDir / "mod-settings.dat").write_bytes(b"\x01\x00\x01")
    with pytest.raises(SettingsError):
        ModSettings.load(modsDir)
