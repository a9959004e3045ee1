# browser_testing/drivers/chrome.py
from __future__ import annotations

"""Local chromedriver process
-----------------------------
Starts and stops a chromedriver binary so the remote driver has an endpoint
to talk to. Without a configured binary, selenium manager resolves one.
"""

import os
import platform
from pathlib import Path
from typing import Dict, List, Optional

from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.driver_finder import DriverFinder

from browser_testing.utils.config import Settings, get_settings
from browser_testing.utils.logger import get_logger


def on_windows() -> bool:
    return platform.system() == "Windows"


def on_mac() -> bool:
    return platform.system() == "Darwin"


class ChromeProcess:

    def __init__(
        self,
        driver: Optional[Path] = None,
        port: Optional[int] = None,
        arguments: Optional[List[str]] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        s = settings or get_settings()
        self.driver = driver if driver is not None else s.CHROMEDRIVER_PATH
        self.port = port if port is not None else s.CHROMEDRIVER_PORT
        self.arguments = list(arguments or [])
        self.log = get_logger(__name__)
        self._service: Optional[Service] = None

        if self.driver is not None and not Path(self.driver).exists():
            raise RuntimeError(f"Invalid path to Chromedriver [{self.driver}].")

    def environment(self) -> Dict[str, str]:
        """Process environment; Linux drivers get a DISPLAY."""
        env = dict(os.environ)
        if not (on_mac() or on_windows()):
            env.setdefault("DISPLAY", ":0")
        return env

    def executable(self) -> str:
        """Configured binary, else the one selenium manager resolves."""
        if self.driver is not None:
            return str(self.driver)
        path = DriverFinder(Service(port=self.port), ChromeOptions()).get_driver_path()
        self.log.debug(f"selenium manager resolved chromedriver at {path}")
        return path

    def to_service(self) -> Service:
        return Service(
            executable_path=self.executable(),
            port=self.port,
            service_args=self.arguments,
            env=self.environment(),
        )

    @property
    def running(self) -> bool:
        return self._service is not None and self._service.is_connectable()

    def start(self) -> "ChromeProcess":
        service = self.to_service()
        service.start()
        self._service = service
        self.log.info(f"chromedriver listening on {service.service_url}")
        return self

    def stop(self) -> None:
        if self._service is not None:
            self._service.stop()
            self._service = None
            self.log.info("chromedriver stopped")

    def __enter__(self) -> "ChromeProcess":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
