import json

import pytest

from mcinstall.cli import load_config
from mcinstall.exceptions import ConfigError, ConfigParseError, ConfigValidationError
from mcinstall.models import DEFAULT_PROPERTIES, ConfigEntry, InstallerConfig


def test_defaults():
    config = InstallerConfig()

    assert config.download.max_attempts == 3
    assert config.download.retry_delay == 2.0
    assert config.launch.jvm_args == ["-Xmx1024M", "-Xms1024M"]
    assert config.forge_minecraft_version == "1.20.1"
    assert [e.key for e in config.properties] == [k for k, _ in DEFAULT_PROPERTIES]


def test_from_dict_overrides():
    config = InstallerConfig.from_dict(
        {
            "download": {"max_attempts": 5, "retry_delay": 0.5},
            "launch": {"jvm_args": ["-Xmx2G"]},
            "forge_minecraft_version": "1.19.2",
            "properties": {"motd": "Hello", "pvp": False},
            "unknown": 1,
        }
    )

    assert config.download.max_attempts == 5
    assert config.download.retry_delay == 0.5
    assert config.download.timeout == 30.0
    assert config.launch.jvm_args == ["-Xmx2G"]
    assert config.launch.java == "java"
    assert config.forge_minecraft_version == "1.19.2"
    assert config.properties == [ConfigEntry("motd", "Hello"), ConfigEntry("pvp", "false")]


@pytest.mark.parametrize(
    "data",
    [
        {"download": {"max_attempts": 0}},
        {"download": {"retry_delay": -1}},
        {"download": {"timeout": 0}},
        {"download": {"max_attempts": "many"}},
        {"download": "fast"},
        {"launch": {"jvm_args": "-Xmx1G"}},
        {"properties": [["motd"]]},
        ["not", "a", "dict"],
        [],
        {"paper_allow_prerelease": "false"},
        {"paper_allow_prerelease": 1},
    ],
)
def test_invalid_values(data):
    with pytest.raises(ConfigValidationError):
        InstallerConfig.from_dict(data)


def test_load_toml(tmp_path):
    path = tmp_path / "mcinstall.toml"
    path.write_text('forge_minecraft_version = "1.18.2"\n[download]\nmax_attempts = 4\n')

    config = load_config(str(path))

    assert config.forge_minecraft_version == "1.18.2"
    assert config.download.max_attempts == 4


def test_load_json_and_yaml(tmp_path):
    json_path = tmp_path / "c.json"
    json_path.write_text(json.dumps({"paper_allow_prerelease": True}))
    yaml_path = tmp_path / "c.yaml"
    yaml_path.write_text("launch:\n  java: /opt/java/bin/java\n")

    assert load_config(str(json_path)).paper_allow_prerelease is True
    assert load_config(str(yaml_path)).launch.java == "/opt/java/bin/java"


def test_load_errors(tmp_path):
    bad = tmp_path / "c.toml"
    bad.write_text("not = [valid")
    ini = tmp_path / "c.ini"
    ini.write_text("")

    with pytest.raises(ConfigParseError):
        load_config(str(bad))
    with pytest.raises(ConfigParseError):
        load_config(str(ini))
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "missing.toml"))
    assert load_config(None) == InstallerConfig()
