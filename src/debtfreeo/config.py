"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_MAX_MONTHS = 1200


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to ``default``."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}.") from exc
    if parsed <= 0:
        raise ValueError(f"{name} must be positive, got {parsed}.")
    return parsed


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Debtfreeo"
    LOG_FILENAME = "debtfreeo.log"

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("DEBTFREEO_DEV_MODE", default=True)
        self.MAX_MONTHS = _env_int("DEBTFREEO_MAX_MONTHS", DEFAULT_MAX_MONTHS)
        self.CURRENCY_SYMBOL = os.getenv("DEBTFREEO_CURRENCY", "£")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where log files live."""

        data_root = os.getenv("DEBTFREEO_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected locations fall back to user-local storage.
            fallback_path = Path.home() / f".{self.APP_NAME.lower()}"
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()


class DevConfig(BaseConfig):
    """Development configuration; always logs verbosely to the console."""

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = True


class TestConfig(BaseConfig):
    """Configuration used by the test-suite: quiet console, optional data dir."""

    __test__ = False

    def __init__(self, data_dir: Path | None = None) -> None:
        super().__init__()
        self.DEV_MODE = False
        if data_dir is not None:
            data_dir.mkdir(parents=True, exist_ok=True)
            self.DATA_DIR = data_dir
