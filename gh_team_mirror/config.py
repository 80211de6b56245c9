import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .models import DEFAULT_EXPORT_FILE

TOKEN_FALLBACKS = ("GITHUB_TOKEN", "GH_TOKEN")


def load_env_file(path=".env"):
    """Load variables from a .env file without overriding the environment"""
    env_file = Path(path)
    if env_file.exists():
        load_dotenv(env_file, override=False)


def get_token(env_var):
    """Token from env_var, then GITHUB_TOKEN / GH_TOKEN; None when unset"""
    for name in (env_var,) + TOKEN_FALLBACKS:
        value = os.environ.get(name)
        if value:
            return value
    return None


@dataclass
class Settings:
    token: Optional[str] = None
    export_file: str = DEFAULT_EXPORT_FILE
    log_dir: str = "logs"

    @classmethod
    def from_env(cls, token_var):
        return cls(
            token=get_token(token_var),
            export_file=os.environ.get("TEAMS_EXPORT_FILE") or DEFAULT_EXPORT_FILE,
            log_dir=os.environ.get("MIGRATION_LOG_DIR") or "logs",
        )
