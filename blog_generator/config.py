"""
Configuration and logging setup.

Every `Settings` field can be overridden by an environment variable of the same
name; a `.env` file in the working directory is loaded first.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Settings:
    """Service configuration"""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    CORS_ORIGINS: List[str] = field(default_factory=lambda: ["*"])

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    # Text backend: "gemini" (hosted) or "local" (Hugging Face model/adapter)
    GENERATOR_BACKEND: str = "gemini"
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-1.5-flash"
    MODEL_PATH: str = "artifacts/article-generator-flan-t5-lora"
    REQUEST_TIMEOUT: float = 60.0  # seconds

    # Article store: "memory" or "json" (key/value slot file)
    STORE_BACKEND: str = "memory"
    STORE_PATH: str = "blogs.json"
    STORE_KEY: str = "blogs"

    def __post_init__(self):
        """Load from environment variables"""
        for key, info in self.__dataclass_fields__.items():
            env_value = os.getenv(key)
            if env_value is None:
                continue
            if info.type == bool:
                setattr(self, key, env_value.lower() in ("true", "1", "yes"))
            elif info.type == int:
                setattr(self, key, int(env_value))
            elif info.type == float:
                setattr(self, key, float(env_value))
            elif info.type == List[str]:
                setattr(self, key, [v.strip() for v in env_value.split(",") if v.strip()])
            else:
                setattr(self, key, env_value)

        self.GENERATOR_BACKEND = self.GENERATOR_BACKEND.strip().lower()
        self.STORE_BACKEND = self.STORE_BACKEND.strip().lower()
        if self.GENERATOR_BACKEND not in ("gemini", "local"):
            raise ValueError("GENERATOR_BACKEND must be 'gemini' or 'local'")
        if self.STORE_BACKEND not in ("memory", "json"):
            raise ValueError("STORE_BACKEND must be 'memory' or 'json'")


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    """Read `.env` (without overriding real environment) and build `Settings`."""
    load_dotenv(dotenv_path)
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Configure root logging once for the process."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if settings.LOG_FILE:
        handlers.append(logging.FileHandler(settings.LOG_FILE, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )
