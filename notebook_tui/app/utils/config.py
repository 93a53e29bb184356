import os
from pathlib import Path
from typing import Optional

import toml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from ..exceptions import ConfigurationError


class ServerConfig(BaseModel):
    """Telnet host configuration with validation."""

    host: str = "0.0.0.0"
    port: int = 2424
    max_connections: int = 50
    connection_timeout: int = 300

    @field_validator('port')
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 1 <= v <= 65535:
            raise ConfigurationError(f"Port must be 1-65535, got {v}")
        return v

    @field_validator('max_connections')
    @classmethod
    def validate_max_connections(cls, v: int) -> int:
        if v < 1:
            raise ConfigurationError("max_connections must be positive")
        if v > 10000:
            raise ConfigurationError("max_connections too high (max 10000)")
        return v

    @field_validator('connection_timeout')
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if v < 0:
            raise ConfigurationError("connection_timeout cannot be negative")
        return v


class DatabaseConfig(BaseModel):
    """Database configuration with validation."""

    dsn: str = "sqlite+aiosqlite:///notebook.db"
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 3600

    @field_validator('dsn')
    @classmethod
    def validate_dsn(cls, v: str) -> str:
        if not v.startswith(('mysql', 'postgresql', 'sqlite')):
            raise ConfigurationError(f"Unsupported database driver: {v.split(':')[0]}")
        return v

    @field_validator('pool_size')
    @classmethod
    def validate_pool_size(cls, v: int) -> int:
        if v < 1:
            raise ConfigurationError("pool_size must be positive")
        if v > 100:
            raise ConfigurationError("pool_size too high (max 100)")
        return v

    @model_validator(mode='after')
    def validate_pool_settings(self):
        """Validate pool settings are reasonable together."""
        total = self.pool_size + self.max_overflow
        if total > 200:
            raise ConfigurationError(
                f"Total pool connections ({total}) too high (max 200)"
            )
        return self

    @property
    def is_sqlite(self) -> bool:
        return self.dsn.startswith("sqlite")


class SecurityConfig(BaseModel):
    """Security configuration with validation."""

    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 4
    max_login_attempts: int = 3

    @field_validator('argon2_memory_cost')
    @classmethod
    def validate_argon2_memory(cls, v: int) -> int:
        if v < 8192:
            raise ConfigurationError("argon2_memory_cost too low (min 8192)")
        if v > 1048576:
            raise ConfigurationError("argon2_memory_cost too high (max 1048576)")
        return v

    @field_validator('max_login_attempts')
    @classmethod
    def validate_max_login_attempts(cls, v: int) -> int:
        if v < 1:
            raise ConfigurationError("max_login_attempts must be positive")
        return v


class UIConfig(BaseModel):
    width: int = 80
    rows: int = 24
    ansi: bool = True
    encoding: str = "utf-8"
    line_char: str = "="
    alt_line_char: str = "-"
    password_char: str = "*"

    @field_validator('width')
    @classmethod
    def validate_width(cls, v: int) -> int:
        if v < 40:
            raise ConfigurationError(f"width too small (min 40), got {v}")
        return v

    @field_validator('line_char', 'alt_line_char', 'password_char')
    @classmethod
    def validate_single_char(cls, v: str) -> str:
        if len(v) != 1:
            raise ConfigurationError(f"Expected a single character, got {v!r}")
        return v


class NotesConfig(BaseModel):
    max_title_length: int = 100
    max_text_length: int = 2000


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = "notebook.log"
    console_output: bool = False
    max_bytes: int = 10485760
    backup_count: int = 5


class Config(BaseSettings):
    server: ServerConfig = Field(default_factory=ServerConfig)
    db: DatabaseConfig = Field(default_factory=DatabaseConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    notes: NotesConfig = Field(default_factory=NotesConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    class Config:
        env_file = ".env"
        env_prefix = "NOTEBOOK_"
        env_nested_delimiter = "__"

    @classmethod
    def from_toml(cls, path: str | Path) -> "Config":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r") as f:
            data = toml.load(f)

        return cls(**data)


_config: Optional[Config] = None


def load_config(path: Optional[str | Path] = None) -> Config:
    global _config
    if _config is None:
        if path is None:
            path = os.environ.get("NOTEBOOK_CONFIG", "config.toml")

        config_path = Path(path)
        if config_path.exists():
            _config = Config.from_toml(config_path)
        else:
            _config = Config()

    return _config


def get_config() -> Config:
    if _config is None:
        return load_config()
    return _config


def reset_config() -> None:
    """Forget the loaded configuration (for testing)."""
    global _config
    _config = None
