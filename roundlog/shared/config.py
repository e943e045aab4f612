"""Configuration management for roundlog."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Application configuration."""

    # Project paths
    ROOT_DIR = Path(__file__).parent.parent.parent
    DATA_DIR = Path(os.getenv("ROUNDLOG_DATA_DIR", str(ROOT_DIR / "data")))
    LOGS_DIR = Path(os.getenv("ROUNDLOG_LOGS_DIR", str(ROOT_DIR / "logs")))

    # Canonical store layout
    STORE_FILENAME: str = "data.csv"
    RAW_DIRNAME: str = "raw"
    TEST_DIRNAME: str = "test"

    # Locking and logging
    LOCK_TIMEOUT: float = float(os.getenv("ROUNDLOG_LOCK_TIMEOUT", "10.0"))
    LOG_LEVEL: str = os.getenv("ROUNDLOG_LOG_LEVEL", "INFO")

    @classmethod
    def base_dir(cls, test: bool = False) -> Path:
        """Return the data root, or its test sandbox when ``test`` is set."""
        return cls.DATA_DIR / cls.TEST_DIRNAME if test else cls.DATA_DIR

    @classmethod
    def store_path(cls, test: bool = False) -> Path:
        """Path of the canonical consolidated CSV."""
        return cls.base_dir(test) / cls.STORE_FILENAME

    @classmethod
    def raw_dir(cls, test: bool = False) -> Path:
        """Directory holding pending raw exports."""
        return cls.base_dir(test) / cls.RAW_DIRNAME

    @classmethod
    def validate(cls) -> None:
        """Validate configuration values."""
        if cls.LOCK_TIMEOUT <= 0:
            raise ValueError("ROUNDLOG_LOCK_TIMEOUT must be positive")


config = Config()
