# tests/fmm/config/test_settings.py
import pytest

from fmm.config.settings import FmmConfig, loadConfig
from fmm.core.errors import ConfigError
from fmm.mods.ident import ModIdent
from fmm.semver.version import ModVersion


def test_missing_file_gives_defaults(tmp_path):
    config = loadConfig(tmp_path / "absent.json5")
    assert config == FmmConfig()
    assert config.sets == {}
    assert config.devMode is False


def test_load_json5(tmp_path):
    path = tmp_path / "fmm.json5"
    path.write_text(
        """
        {
          // JSON5 allows comments and trailing commas
          gameDir: "/games/factorio",
          sets: {
            kr2: ["Krastorio2", "flib@0.12.9",],
          },
          devMode: true,
        }
        """,
        encoding="utf-8",
    )

    config = loadConfig(path)

    assert str(config.gameDir) == "/games/factorio"
    assert config.devMode is True
    assert config.modSet("kr2") == [ModIdent("Krastorio2"), ModIdent("flib", ModVersion(0, 12, 9))]


@pytest.mark.parametrize("text", ["{ not valid", '{"unknownKey": 1}', '{"devMode": "maybe"}', "[1, 2]"])
def test_invalid_file(tmp_path, text):
    path = tmp_path / "fmm.json5"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        loadConfig(path)


def test_mod_set_errors():
    config = FmmConfig(sets={"broken": ["ok", "bad@x.y"]})
    with pytest.raises(ConfigError, match="does not exist"):
        config.modSet("missing")
    with pytest.raises(ConfigError, match="broken"):
        config.modSet("broken")


def test_resolve_mods_dir(tmp_path):
    gameDir = tmp_path / "game"
    (gameDir / "mods").mkdir(parents=True)
    explicit = tmp_path / "elsewhere"
    explicit.mkdir()

    assert FmmConfig(gameDir=gameDir).resolveModsDir() == gameDir / "mods"
    assert FmmConfig(gameDir=gameDir, modsDir=explicit).resolveModsDir() == explicit

    with pytest.raises(ConfigError):
        FmmConfig(modsDir=tmp_path / "nope").resolveModsDir()
    with pytest.raises(ConfigError):
        FmmConfig(gameDir=tmp_path).resolveModsDir()
    with pytest.raises(ConfigError):
        FmmConfig().resolveModsDir()
