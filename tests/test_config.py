import json
import os

import pytest

from labelwrap.app import config


def test_defaults():
    cfg = config.load_config()
    assert cfg == {
        "LABELWRAP_WIDTH": 27,
        "LABELWRAP_LOOK_BACK": 10,
        "LABELWRAP_BARCODE": 5,
        "LABELWRAP_HEADER": "",
    }


def test_config_file_overrides_defaults(isolated_env):
    (isolated_env / "config.json").write_text(
        json.dumps({"LABELWRAP_WIDTH": 32, "LABELWRAP_HEADER": "Kitchen"}), encoding="utf-8"
    )
    cfg = config.load_config()
    assert cfg["LABELWRAP_WIDTH"] == 32
    assert cfg["LABELWRAP_HEADER"] == "Kitchen"
    assert cfg["LABELWRAP_LOOK_BACK"] == 10


def test_environment_overrides_config_file(isolated_env, monkeypatch):
    (isolated_env / "config.json").write_text(json.dumps({"LABELWRAP_WIDTH": 32}), encoding="utf-8")
    monkeypatch.setenv("LABELWRAP_WIDTH", "40")
    monkeypatch.setenv("LABELWRAP_LOOK_BACK", " 6 ")
    cfg = config.load_config()
    assert cfg["LABELWRAP_WIDTH"] == 40
    assert cfg["LABELWRAP_LOOK_BACK"] == 6


def test_invalid_integers_fall_back_to_defaults(isolated_env, monkeypatch):
    (isolated_env / "config.json").write_text(json.dumps({"LABELWRAP_BARCODE": True}), encoding="utf-8")
    monkeypatch.setenv("LABELWRAP_WIDTH", "wide")
    cfg = config.load_config()
    assert cfg["LABELWRAP_WIDTH"] == 27
    assert cfg["LABELWRAP_BARCODE"] == 5


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_unusable_config_file_is_ignored(isolated_env, content):
    (isolated_env / "config.json").write_text(content, encoding="utf-8")
    assert config.load_config()["LABELWRAP_WIDTH"] == 27


def test_env_file_is_loaded(isolated_env):
    (isolated_env / ".env").write_text(
        "# printer settings\n"
        "export LABELWRAP_BARCODE='77'\n"
        "LABELWRAP_HEADER=\"Shelf A\"\n"
        "not a setting\n",
        encoding="utf-8",
    )
    cfg = config.load_config()
    assert cfg["LABELWRAP_BARCODE"] == 77
    assert cfg["LABELWRAP_HEADER"] == "Shelf A"


def test_env_file_does_not_override_existing(isolated_env, monkeypatch):
    (isolated_env / ".env").write_text("LABELWRAP_WIDTH=12\n", encoding="utf-8")
    monkeypatch.setenv("LABELWRAP_WIDTH", "30")
    config.load_env_from_files(override=False)
    assert os.environ["LABELWRAP_WIDTH"] == "30"
    config.load_env_from_files(override=True)
    assert os.environ["LABELWRAP_WIDTH"] == "12"


@pytest.mark.parametrize("line, expected", [
    ("KEY=VALUE", ("KEY", "VALUE")),
    ("export A = 'b c'", ("A", "b c")),
    ('QUOTED="x=y"', ("QUOTED", "x=y")),
    ("EMPTY=", ("EMPTY", "")),
    ("# comment", None),
    ("   ", None),
    ("novalue", None),
    ("=orphan", None),
])
def test_parse_env_line(line, expected):
    assert config._parse_env_line(line) == expected


def test_config_path_from_env(isolated_env):
    assert config.get_config_path() == str(isolated_env / "config.json")


def test_config_path_under_xdg(tmp_path, monkeypatch):
    monkeypatch.delenv("LABELWRAP_CONFIG_PATH")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    path = config.get_config_path()
    assert path in (
        os.path.join(str(tmp_path / "xdg"), "labelwrap", "config.json"),
        "/etc/labelwrap/config.json",
    )
