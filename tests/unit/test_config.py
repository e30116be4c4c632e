"""Unit tests for config.py"""

import pytest

from pagemark.config import load_config


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run each test in an empty directory so no config.yaml is picked up."""
    monkeypatch.chdir(tmp_path)


def test_load_config_defaults():
    """Settings defaults apply when no config.yaml, env var, or override exists."""
    settings = load_config()
    assert settings.db_url == "sqlite:///pagemark.db"
    assert settings.page_capacity == 720
    assert settings.image_base == "images/"


def test_load_config_uses_env(monkeypatch):
    """PAGEMARK_<FIELD> env vars are coerced to the field type."""
    monkeypatch.setenv("PAGEMARK_DB_URL", "sqlite:///env.db")
    monkeypatch.setenv("PAGEMARK_PAGE_CAPACITY", "500")
    settings = load_config()
    assert settings.db_url == "sqlite:///env.db"
    assert settings.page_capacity == 500.0


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    (tmp_path / "config.yaml").write_text("image_base: 'yaml/'\npage_capacity: 300\n")
    monkeypatch.setenv("PAGEMARK_IMAGE_BASE", "env/")
    settings = load_config()
    assert settings.image_base == "env/"
    assert settings.page_capacity == 300


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override wins; None overrides are ignored."""
    monkeypatch.setenv("PAGEMARK_PAGE_CAPACITY", "500")
    settings = load_config(overrides={"page_capacity": 100, "image_base": None})
    assert settings.page_capacity == 100
    assert settings.image_base == "images/"


def test_load_config_invalid_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_non_mapping_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text("- just\n- a list\n")
    with pytest.raises(ValueError, match="expected a mapping"):
        load_config()


@pytest.mark.parametrize("overrides", [{"page_capacity": 0}, {"log_level": "LOUD"}])
def test_load_config_rejects_invalid_values(overrides):
    with pytest.raises(ValueError):
        load_config(overrides=overrides)
