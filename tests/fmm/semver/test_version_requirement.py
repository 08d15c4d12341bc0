# tests/fmm/semver/test_version_requirement.py
import pytest

from fmm.semver.version import ModVersion, parseModVersion, parseVersionRequirement


def _matches(rawRequirement: str, candidates: list[str]) -> list[str]:
    req = parseVersionRequirement(rawRequirement)
    return [raw for raw in candidates if req.matches(parseModVersion(raw))]


@pytest.mark.parametrize(
    "raw, operator, version",
    [
        (">= 1.1.0", ">=", ModVersion(1, 1, 0)),
        (">=1.1", ">=", ModVersion(1, 1, 0)),
        ("<= 0.17.3", "<=", ModVersion(0, 17, 3)),
        ("< 2.0.0", "<", ModVersion(2, 0, 0)),
        ("> 2.0.0", ">", ModVersion(2, 0, 0)),
        ("= 1.2.3", "=", ModVersion(1, 2, 3)),
    ],
)
def test_parse(raw, operator, version):
    req = parseVersionRequirement(raw)
    assert req.operator == operator
    assert req.version == version


@pytest.mark.parametrize("raw", ["", "1.0.0", "~ 1.0.0", ">=", "=> 1.0.0", ">= x.y"])
def test_parse_invalid(raw):
    with pytest.raises(ValueError):
        parseVersionRequirement(raw)


def test_matches_each_operator():
    candidates = ["0.9.0", "1.0.0", "1.0.1", "2.0.0"]
    assert _matches("< 1.0.0", candidates) == ["0.9.0"]
    assert _matches("<= 1.0.0", candidates) == ["0.9.0", "1.0.0"]
    assert _matches("= 1.0.0", candidates) == ["1.0.0"]
    assert _matches(">= 1.0.0", candidates) == ["1.0.0", "1.0.1", "2.0.0"]
    assert _matches("> 1.0.0", candidates) == ["1.0.1", "2.0.0"]


def test_str_round_trip():
    req = parseVersionRequirement(">=1.2")
    assert str(req) == ">= 1.2.0"
    assert parseVersionRequirement(str(req)) == req
