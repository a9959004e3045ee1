# browser_testing/utils/config.py
from __future__ import annotations

import functools
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# ---------- Enums ----------

class DriverBackend(str, Enum):
    selenium = "selenium"
    playwright = "playwright"


class BrowserType(str, Enum):
    chromium = "chromium"
    firefox = "firefox"
    webkit = "webkit"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# ---------- Settings ----------

class Settings(BaseSettings):
    """
    Central configuration for browser tests.

    Values load in this order of precedence:
      1) Environment variables (prefixed with BROWSER_TESTING_)
      2) .env file in project root
      3) Defaults below
    """

    # ---- Site under test ----
    BASE_URL: str = Field(default="http://localhost", description="Prepended to relative URLs")
    WAIT_SECONDS: float = Field(default=5, ge=0, description="Default timeout for wait helpers")

    # ---- Driver configuration ----
    DRIVER_BACKEND: DriverBackend = Field(default=DriverBackend.selenium)
    DRIVER_URL: str = Field(default="http://localhost:9515", description="WebDriver endpoint")
    CHROMEDRIVER_PATH: Optional[Path] = Field(default=None, description="None = let selenium locate it")
    CHROMEDRIVER_PORT: int = Field(default=9515, ge=1, le=65535)
    START_CHROMEDRIVER: bool = Field(default=False, description="Start chromedriver for the test session")

    # ---- Browser configuration ----
    HEADLESS: bool = Field(default=True)
    BROWSER_TYPE: BrowserType = Field(default=BrowserType.chromium, description="Playwright browser")
    WINDOW_WIDTH: int = Field(default=1920, ge=320, le=7680)
    WINDOW_HEIGHT: int = Field(default=1080, ge=320, le=4320)
    FIT_ON_FAILURE: bool = Field(default=True)

    # ---- Artifacts ----
    SCREENSHOTS_DIR: Path = Field(default=Path("./tests/browser/screenshots"))
    CONSOLE_DIR: Path = Field(default=Path("./tests/browser/console"))
    SOURCE_DIR: Path = Field(default=Path("./tests/browser/source"))

    # ---- Logging ----
    LOG_LEVEL: LogLevel = Field(default=LogLevel.INFO)
    LOG_TO_FILE: bool = Field(default=False)
    LOG_FILE: Path = Field(default=Path("./browser-testing.log"))
    COLORIZED_OUTPUT: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_prefix="BROWSER_TESTING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("BASE_URL")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("SCREENSHOTS_DIR", "CONSOLE_DIR", "SOURCE_DIR", "LOG_FILE", mode="after")
    @classmethod
    def _absolutize(cls, v: Path):
        return v if v.is_absolute() else Path.cwd() / v

    def chrome_arguments(self) -> list[str]:
        args = [f"--window-size={self.WINDOW_WIDTH},{self.WINDOW_HEIGHT}", "--disable-gpu"]
        if self.HEADLESS:
            args.append("--headless=new")
        return args

    # Convenience: Playwright launch options dict
    def playwright_launch_kwargs(self) -> dict:
        return {"headless": self.HEADLESS}

    # Convenience: Playwright new_context kwargs
    def playwright_context_kwargs(self) -> dict:
        return {"viewport": {"width": self.WINDOW_WIDTH, "height": self.WINDOW_HEIGHT}}


# --------- Public accessor (memoized) ---------

@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load and cache settings once per process.
    Call `get_settings.cache_clear()` if you need to reload after changing env.
    """
    return Settings()


# --------- Per-browser context ---------

class BrowserConfig(BaseModel):
    """
    Configuration threaded through a browser and every scope derived from it.
    """
    base_url: str = "http://localhost"
    wait_seconds: float = Field(default=5, ge=0)
    screenshots_dir: Path = Path("./tests/browser/screenshots")
    console_dir: Path = Path("./tests/browser/console")
    source_dir: Path = Path("./tests/browser/source")
    fit_on_failure: bool = True
    supports_remote_logs: tuple[str, ...] = ("chrome", "phantomjs")

    @classmethod
    def from_settings(cls, s: Settings) -> "BrowserConfig":
        return cls(
            base_url=s.BASE_URL,
            wait_seconds=s.WAIT_SECONDS,
            screenshots_dir=s.SCREENSHOTS_DIR,
            console_dir=s.CONSOLE_DIR,
            source_dir=s.SOURCE_DIR,
            fit_on_failure=s.FIT_ON_FAILURE,
        )
