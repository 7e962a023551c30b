"""
集中式配置（环境变量/ .env），保障可测性与可控性。
"""
# @file purpose: Centralized settings using Pydantic Settings.

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WEBAUTO_", env_file=".env", extra="ignore")

    base_url: str = "https://the-internet.herokuapp.com"
    browser: Literal["chrome", "firefox"] = "chrome"
    headless: bool = True
    # True: resolve the driver binary via webdriver-manager; False: Selenium Manager
    use_driver_manager: bool = True
    wait_timeout_ms: int = 10_000
    poll_interval_ms: int = 500
    page_load_timeout_ms: int = 30_000
    window_width: int = 1280
    window_height: int = 900
    artifacts_dir: Path = Path("artifacts")
    log_level: str = "INFO"


settings = Settings()
