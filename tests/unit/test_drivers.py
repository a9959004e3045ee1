import pytest
from selenium.common.exceptions import WebDriverException

from browser_testing.drivers import actions, chrome, remote
from browser_testing.drivers.actions import SeleniumActions, actions_for
from browser_testing.drivers.chrome import ChromeProcess
from browser_testing.drivers.playwright_driver import PlaywrightDriver
from browser_testing.utils.config import DriverBackend, Settings


def test_invalid_chromedriver_path_is_rejected(tmp_path):
    with pytest.raises(RuntimeError, match="Invalid path to Chromedriver"):
        ChromeProcess(driver=tmp_path / "missing", settings=Settings())


def test_linux_processes_get_a_display(monkeypatch):
    monkeypatch.delenv("DISPLAY", raising=False)
    monkeypatch.setattr(chrome, "on_mac", lambda: False)
    monkeypatch.setattr(chrome, "on_windows", lambda: False)
    assert ChromeProcess(settings=Settings()).environment()["DISPLAY"] == ":0"

    monkeypatch.setattr(chrome, "on_mac", lambda: True)
    assert "DISPLAY" not in ChromeProcess(settings=Settings()).environment()


def test_service_uses_port_and_arguments(tmp_path):
    binary = tmp_path / "chromedriver"
    binary.write_text("")
    process = ChromeProcess(driver=binary, port=9600, arguments=["--verbose"], settings=Settings())

    service = process.to_service()
    assert service.port == 9600
    assert "--verbose" in service.service_args
    assert process.running is False


def test_stop_without_start_is_noop():
    ChromeProcess(settings=Settings()).stop()


def test_without_path_selenium_manager_resolves_binary(monkeypatch):
    lookups = []

    class Finder:
        def __init__(self, service, options):
            lookups.append(service.port)

        def get_driver_path(self):
            return "/opt/drivers/chromedriver"

    monkeypatch.setattr(chrome, "DriverFinder", Finder)
    process = ChromeProcess(port=9700, settings=Settings(CHROMEDRIVER_PATH=None))

    assert process.driver is None
    assert process.to_service().path == "/opt/drivers/chromedriver"
    assert lookups == [9700]


def test_failed_start_leaves_process_stopped(monkeypatch, tmp_path):
    binary = tmp_path / "chromedriver"
    binary.write_text("")

    class BrokenService:
        def __init__(self, **kwargs):
            self.kwargs = kwargs

        def start(self):
            raise WebDriverException("chromedriver exited")

    monkeypatch.setattr(chrome, "Service", BrokenService)
    process = ChromeProcess(driver=binary, settings=Settings())

    with pytest.raises(WebDriverException):
        process.start()
    assert process.running is False
    process.stop()


def test_actions_for_prefers_driver_gestures():
    marker = object()

    class OwnGestures:
        def mouse_actions(self):
            return marker

    assert actions_for(OwnGestures()) is marker
    assert isinstance(actions_for(object()), SeleniumActions)


def test_selenium_actions_perform_each_gesture(monkeypatch):
    performed = []

    class Chain:
        def __init__(self, driver):
            self.steps = []

        def __getattr__(self, name):
            def step(*args):
                self.steps.append((name, *args))
                return self

            return step

        def perform(self):
            performed.append(self.steps)

    monkeypatch.setattr(actions, "ActionChains", Chain)
    gestures = SeleniumActions(driver=None)
    gestures.move_by_offset(1, 2)
    gestures.release()

    assert performed == [[("move_by_offset", 1, 2)], [("release",)]]


def test_create_driver_picks_backend(monkeypatch):
    monkeypatch.setattr(remote, "create_remote_driver", lambda s: ("remote", s.DRIVER_URL))
    monkeypatch.setattr(PlaywrightDriver, "launch", classmethod(lambda cls, s: ("playwright", s.BROWSER_TYPE.value)))

    assert remote.create_driver(Settings(DRIVER_URL="http://grid:4444")) == ("remote", "http://grid:4444")
    assert remote.create_driver(Settings(DRIVER_BACKEND=DriverBackend.playwright)) == ("playwright", "chromium")


def test_chrome_options_follow_settings():
    options = remote.chrome_options(Settings(HEADLESS=True, WINDOW_WIDTH=800, WINDOW_HEIGHT=600))
    assert options.arguments == ["--window-size=800,600", "--disable-gpu", "--headless=new"]
