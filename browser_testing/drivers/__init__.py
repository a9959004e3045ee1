"""
Drivers package
---------------
WebDriver-compatible backends (selenium remote, playwright) plus the local
chromedriver process and backend-neutral mouse gestures.
"""

from .actions import MouseActions, SeleniumActions, actions_for
from .chrome import ChromeProcess
from .remote import create_driver, create_remote_driver

__all__ = [
    "MouseActions",
    "SeleniumActions",
    "actions_for",
    "ChromeProcess",
    "create_driver",
    "create_remote_driver",
]
