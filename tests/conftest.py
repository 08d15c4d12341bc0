import json
import sys
import zipfile
from pathlib import Path

import pytest



def pytest_configure(config: pytest.Config) -> None:
    if sys.flags.optimize:
        raise RuntimeError("Assertions are disabled (optimize > 0)")



def _infoJson(name: str, version: str, dependencies: list[str] | None) -> str:
    info: dict = {"name": name, "version": version, "title": name}
    if dependencies is not None:
        info["dependencies"] = dependencies
    return json.dumps(info)



@pytest.fixture()
def modsDir(tmp_path: Path) -> Path:
    path = tmp_path / "mods"
    path.mkdir()
    (path / "mod-list.json").write_text(json.dumps({"mods": [{"name": "base", "enabled": True}]}), encoding="utf-8")
    return path



@pytest.fixture()
def makeZipMod(modsDir: Path):
    def make(name: str, version: str, dependencies: list[str] | None = None, *, fileName: str | None = None) -> Path:
        path = modsDir / (fileName or f"{name}_{version}.zip")
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr(f"{name}_{version}/info.json", _infoJson(name, version, dependencies))
            archive.writestr(f"{name}_{version}/data.lua", "-- empty\n")
        return path
    return make



@pytest.fixture()
def makeDirMod(modsDir: Path):
    def make(name: str, version: str, dependencies: list[str] | None = None, *, dirName: str | None = None) -> Path:
        path = modsDir / (dirName or f"{name}_{version}")
        path.mkdir()
        (path / "info.json").write_text(_infoJson(name, version, dependencies), encoding="utf-8")
        return path
    return make



@pytest.fixture()
def writeModList(modsDir: Path):
    def write(entries: list[dict]) -> Path:
        path = modsDir / "mod-list.json"
        path.write_text(json.dumps({"mods": entries}), encoding="utf-8")
        return path
    return write



@pytest.fixture()
def readModList(modsDir: Path):
    def read() -> dict[str, dict]:
        data = json.loads((modsDir / "mod-list.json").read_text(encoding="utf-8"))
        return {entry["name"]: entry for entry in data["mods"]}
    return read
