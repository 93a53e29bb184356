import logging

import pytest
from pydantic import ValidationError as PydanticValidationError

from notebook_tui.app.exceptions import ConfigurationError
from notebook_tui.app.utils.config import (
    Config,
    DatabaseConfig,
    SecurityConfig,
    ServerConfig,
    UIConfig,
    get_config,
    load_config,
    reset_config,
)
from notebook_tui.app.utils.logger import get_logger, setup_logging


@pytest.fixture(autouse=True)
def fresh_config():
    reset_config()
    yield
    reset_config()


def test_defaults():
    config = Config()
    assert config.server.port == 2424
    assert config.ui.width == 80
    assert config.security.max_login_attempts == 3
    assert config.db.is_sqlite


@pytest.mark.parametrize("factory", [
    lambda: ServerConfig(port=0),
    lambda: ServerConfig(max_connections=0),
    lambda: DatabaseConfig(dsn="oracle://db"),
    lambda: DatabaseConfig(pool_size=100, max_overflow=150),
    lambda: SecurityConfig(argon2_memory_cost=1024),
    lambda: SecurityConfig(max_login_attempts=0),
    lambda: UIConfig(width=20),
    lambda: UIConfig(password_char="**"),
])
def test_invalid_values_raise_configuration_error(factory):
    with pytest.raises(ConfigurationError):
        factory()


def test_type_errors_still_come_from_pydantic():
    with pytest.raises(PydanticValidationError):
        UIConfig(width="wide")


def test_load_from_toml(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[ui]\nwidth = 100\nansi = false\n\n[notes]\nmax_title_length = 10\n')

    config = load_config(path)

    assert config.ui.width == 100
    assert config.ui.ansi is False
    assert config.notes.max_title_length == 10
    assert config.server.port == 2424
    assert get_config() is config


def test_from_toml_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config.from_toml(tmp_path / "nope.toml")


def test_load_config_falls_back_to_defaults(tmp_path):
    config = load_config(tmp_path / "nope.toml")
    assert config.ui.width == 80


def test_load_config_uses_env_path(tmp_path, monkeypatch):
    path = tmp_path / "custom.toml"
    path.write_text("[server]\nport = 9999\n")
    monkeypatch.setenv("NOTEBOOK_CONFIG", str(path))

    assert load_config().server.port == 9999


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("NOTEBOOK_UI__WIDTH", "120")
    monkeypatch.setenv("NOTEBOOK_SECURITY__MAX_LOGIN_ATTEMPTS", "5")

    config = load_config(tmp_path / "nope.toml")

    assert config.ui.width == 120
    assert config.security.max_login_attempts == 5


def test_setup_logging_writes_to_file(tmp_path):
    log_file = tmp_path / "logs" / "notebook.log"
    config = load_config(tmp_path / "nope.toml")
    config.logging.file_path = str(log_file)

    logger = setup_logging()
    try:
        get_logger("test").info("hello from the test")
        for handler in logger.handlers:
            handler.flush()

        assert log_file.exists()
        assert "notebook.test" in log_file.read_text()
        assert not any(
            type(h) is logging.StreamHandler for h in logger.handlers
        )
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()


def test_setup_logging_without_outputs_is_silent(tmp_path):
    config = load_config(tmp_path / "nope.toml")
    config.logging.file_path = None

    logger = setup_logging()

    assert [type(h) for h in logger.handlers] == [logging.NullHandler]
    logger.handlers.clear()
