import pytest

from irodsrest.config.loader import load_config, get_config_value, ConfigError


@pytest.mark.unit
def test_load_config_reads_irods_section(make_config):
    config_path = make_config({"irods": {"secret_file": "~/.irods/.irodsA"}})

    cfg = load_config(str(config_path))

    assert cfg["irods"]["host"] == "localhost"
    assert cfg["irods"]["port"] == 8080
    assert cfg["irods"]["secret_file"] == "~/.irods/.irodsA"


@pytest.mark.unit
def test_load_config_default_path(tmp_path, make_config, monkeypatch):
    make_config()
    monkeypatch.chdir(tmp_path)

    cfg = load_config()

    assert cfg["irods"]["username"] == "rods"


@pytest.mark.unit
def test_load_config_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "does-not-exist.yaml"))


@pytest.mark.unit
def test_load_config_invalid_yaml(tmp_path):
    config_path = tmp_path / "irodsrest.yaml"
    config_path.write_text("invalid: [unclosed")

    with pytest.raises(ConfigError):
        load_config(str(config_path))


@pytest.mark.unit
def test_load_config_requires_mapping(tmp_path):
    config_path = tmp_path / "irodsrest.yaml"
    config_path.write_text("- just\n- a list\n")

    with pytest.raises(ConfigError):
        load_config(str(config_path))


@pytest.mark.unit
def test_load_config_fills_missing_sections(tmp_path):
    config_path = tmp_path / "irodsrest.yaml"
    config_path.write_text("other: 1\n")

    cfg = load_config(str(config_path))

    assert cfg["irods"] == {}
    assert cfg["logging"] == {}


@pytest.mark.unit
def test_get_config_value_dot_path():
    cfg = {"irods": {"port": 8080}, "logging": {"level": "INFO"}}
    assert get_config_value(cfg, "irods.port") == 8080
    assert get_config_value(cfg, "irods.zone", "tempZone") == "tempZone"
    assert get_config_value(cfg, "logging.level.deep") is None
