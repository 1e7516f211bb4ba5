"""Settings for taskminder, read from environment variables (+ optional .env)."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from taskminder.models.constants import DUE_SOON_DAYS

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    tasks_file: Path
    categories_file: Path
    priorities_file: Path
    due_soon_days: int
    log_level: str

    @staticmethod
    def from_env() -> "Settings":
        # Data directory defaults to ./medialab, next to where the app is started
        data_dir = _env_path("TASKMINDER_DATA_DIR", Path("medialab"))
        return Settings(
            data_dir=data_dir,
            tasks_file=_env_path("TASKMINDER_TASKS_FILE", data_dir / "tasks.json"),
            categories_file=_env_path("TASKMINDER_CATEGORIES_FILE", data_dir / "categories.json"),
            priorities_file=_env_path("TASKMINDER_PRIORITIES_FILE", data_dir / "priorities.json"),
            due_soon_days=_env_int("TASKMINDER_DUE_SOON_DAYS", DUE_SOON_DAYS),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
