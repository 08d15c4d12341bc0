# tests/fmm/saves/test_sync.py
from pathlib import Path

from fmm.core.errors import MatchingDependencyNotFoundError, ModDoesNotExistError, ModVersionDoesNotExistError
from fmm.dat.propertytree import PTBool, PTDict, PTNone, PTNumber, encodePropertyTree
from fmm.mods.catalog import ModCatalog
from fmm.mods.ident import ModIdent
from fmm.saves.modsettings import ModSettings
from fmm.saves.savefile import SaveFile
from fmm.saves.sync import syncWithSave, syncWithSet
from fmm.semver.version import ModVersion


def makeSave(mods: list[ModIdent], startup: PTDict | None = None) -> SaveFile:
    return SaveFile(
        path=Path("save.zip"),
        mapVersion=ModVersion(1, 1, 110, 0),
        mods=mods,
        startupSettings=startup or PTDict({"startup": PTDict()}),
    )


def test_sync_with_set_makes_exactly_the_closure_active(modsDir, makeZipMod, writeModList, readModList):
    makeZipMod("a", "1.0.0", ["b"])
    makeZipMod("b", "1.0.0")
    makeZipMod("c", "1.0.0")
    writeModList([{"name": "base", "enabled": True}, {"name": "c", "enabled": True}])
    catalog = ModCatalog.load(modsDir)

    failures = syncWithSet(catalog, [ModIdent("a"), ModIdent("base")])

    assert failures == []
    manifest = readModList()
    assert manifest["base"]["enabled"] is True
    assert manifest["a"] == {"name": "a", "enabled": True}
    assert manifest["b"] == {"name": "b", "version": "1.0.0", "enabled": True}
    assert manifest["c"]["enabled"] is False


def test_sync_with_set_persists_despite_failures(modsDir, makeZipMod, readModList):
    makeZipMod("a", "1.0.0")
    makeZipMod("needs", "1.0.0", ["absent"])
    catalog = ModCatalog.load(modsDir)

    failures = syncWithSet(catalog, [ModIdent("ghost"), ModIdent("needs"), ModIdent("a")])

    assert [(ident.name, type(err)) for ident, err in failures] == [
        ("ghost", ModDoesNotExistError),
        ("needs", MatchingDependencyNotFoundError),
    ]
    manifest = readModList()
    assert manifest["a"]["enabled"] is True
    assert manifest["needs"]["enabled"] is True
    assert "ghost" not in manifest


def test_sync_with_save_pins_recorded_versions(modsDir, makeZipMod, readModList):
    makeZipMod("a", "1.0.0")
    makeZipMod("a", "2.0.0")
    makeZipMod("b", "0.3.0")
    catalog = ModCatalog.load(modsDir)
    save = makeSave([
        ModIdent("base", ModVersion(1, 1, 110)),
        ModIdent("a", ModVersion(1, 0, 0)),
        ModIdent("b", ModVersion(0, 4, 0)),
    ])

    failures = syncWithSave(catalog, save)

    assert len(failures) == 1
    ident, err = failures[0]
    assert ident == ModIdent("b", ModVersion(0, 4, 0))
    assert isinstance(err, ModVersionDoesNotExistError)
    manifest = readModList()
    assert manifest["a"] == {"name": "a", "version": "1.0.0", "enabled": True}
    assert manifest["b"]["enabled"] is False
    assert manifest["base"]["enabled"] is True


def test_sync_with_save_merges_startup_settings(modsDir, makeZipMod):
    makeZipMod("a", "1.0.0")
    settingsPath = modsDir / "mod-settings.dat"
    existing = PTDict({
        "startup": PTDict({"local": PTDict({"value": PTBool(True)})}),
        "runtime-global": PTDict(),
        "runtime-per-user": PTDict(),
    })
    settingsPath.write_bytes(b"\x01\x00\x01\x00\x6e\x00\x00\x00\x00" + encodePropertyTree(existing))
    catalog = ModCatalog.load(modsDir)
    settings = ModSettings.load(modsDir)
    save = makeSave(
        [ModIdent("a", ModVersion(1, 0, 0))],
        PTDict({"startup": PTDict({"from-save": PTDict({"value": PTNumber(3.0)})})}),
    )

    assert syncWithSave(catalog, save, settings) == []

    reloaded = ModSettings.load(modsDir)
    assert reloaded.startup() == PTDict({
        "local": PTDict({"value": PTBool(True)}),
        "from-save": PTDict({"value": PTNumber(3.0)}),
    })
    assert catalog.get("a").enabled.isEnabled


def test_sync_with_save_without_startup_settings(modsDir, makeZipMod, readModList):
    makeZipMod("a", "1.0.0")
    settingsPath = modsDir / "mod-settings.dat"
    existing = PTDict({"startup": PTDict({"local": PTDict({"value": PTBool(True)})})})
    original = b"\x01\x00\x01\x00\x6e\x00\x00\x00\x00" + encodePropertyTree(existing)
    settingsPath.write_bytes(original)
    catalog = ModCatalog.load(modsDir)
    settings = ModSettings.load(modsDir)
    save = SaveFile(
        path=Path("save.zip"),
        mapVersion=ModVersion(1, 1, 110, 0),
        mods=[ModIdent("a", ModVersion(1, 0, 0))],
        startupSettings=PTNone(),
    )

    assert syncWithSave(catalog, save, settings) == []

    assert settingsPath.read_bytes() == original
    assert readModList()["a"] == {"name": "a", "version": "1.0.0", "enabled": True}
