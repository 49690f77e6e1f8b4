from pathlib import Path
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Priority: ./.env > parent dir .env
cwd = Path.cwd()
local_env = cwd / ".env"
parent_env = cwd.parent / ".env"

env_file = None
if local_env.exists():
    env_file = local_env
elif parent_env.exists():
    env_file = parent_env

from dotenv import load_dotenv
if env_file:
    load_dotenv(env_file, override=False)


DEFAULT_BASE_PATH = "/fs"


class BridgeConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FSBRIDGE_",
        env_file=env_file,
        env_file_encoding="utf-8",
        extra="ignore"
    )

    host: str = "127.0.0.1"
    port: int = 8080
    base_path: str = DEFAULT_BASE_PATH
    log_level: str = "WARNING"

    @field_validator("base_path")
    @classmethod
    def check_base_path(cls, value: str) -> str:
        return normalize_base_path(value)


def normalize_base_path(path: str) -> str:
    """'fs/' → '/fs', '/' → '' (operations served at the root)."""
    stripped = path.strip().strip("/")
    return f"/{stripped}" if stripped else ""


def load_config() -> BridgeConfig:
    return BridgeConfig()
