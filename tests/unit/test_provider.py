import pytest
from selenium.webdriver.common.by import By

from browser_testing.testing.plugin import caller_name
from browser_testing.testing.provider import BrowserProvider, browsers_needed_for
from conftest import FakeDriver, FakeElement


class CountingFactory:
    def __init__(self, failures: int = 0):
        self.failures = failures
        self.calls = 0
        self.drivers = []

    def __call__(self) -> FakeDriver:
        self.calls += 1
        if self.calls <= self.failures:
            raise ConnectionError("driver not ready")
        driver = FakeDriver()
        driver.add(By.TAG_NAME, "html", FakeElement(tag_name="html", size={"width": 640, "height": 480}))
        self.drivers.append(driver)
        return driver


@pytest.fixture
def factory() -> CountingFactory:
    return CountingFactory()


@pytest.fixture
def provider(factory, config) -> BrowserProvider:
    return BrowserProvider(factory, config)


def test_browsers_needed_for_counts_positional_parameters():
    assert browsers_needed_for(lambda: None) == 0
    assert browsers_needed_for(lambda a, b: None) == 2
    assert browsers_needed_for(lambda a, *rest, flag=True: None) == 1


def test_browse_reuses_primary_between_calls(provider, factory):
    seen = []
    provider.browse(lambda b: seen.append(b), "first")
    provider.browse(lambda b: seen.append(b), "second")

    assert factory.calls == 1
    assert seen[0] is seen[1]


def test_browse_creates_one_browser_per_parameter_and_closes_extras(provider, factory):
    seen = []
    provider.browse(lambda a, b, c: seen.extend([a, b, c]), "chat")

    assert factory.calls == 3
    assert len({id(b) for b in seen}) == 3
    assert [d.quit_calls for d in factory.drivers] == [0, 1, 1]
    assert provider.browsers == seen[:1]


def test_browse_captures_failure_artifacts(provider, factory, config):
    def failing(a, b):
        a.driver.page_source = "<html>oops</html>"
        a.assert_source_has("oops")
        raise AssertionError("expected failure")

    with pytest.raises(AssertionError, match="expected failure"):
        provider.browse(failing, "t")

    assert (config.screenshots_dir / "failure-t-0.png").exists()
    assert (config.screenshots_dir / "failure-t-1.png").exists()
    # fit_on_failure resizes to the document before the screenshot
    assert factory.drivers[0].window_size == (640, 480)
    # only the browser that made a source assertion stores its source
    assert (config.source_dir / "t-0.txt").read_text(encoding="utf-8") == "<html>oops</html>"
    assert not (config.source_dir / "t-1.txt").exists()


def test_browse_stores_console_logs_even_on_success(provider, factory, config):
    def record(browser):
        browser.driver.console = [{"level": "INFO", "message": "hello"}]

    provider.browse(record, "logs")
    assert (config.console_dir / "logs-0.log").exists()


def test_fit_on_failure_can_be_disabled(provider, factory):
    def failing(browser):
        browser.disable_fit_on_failure()
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        provider.browse(failing, "nofit")
    assert factory.drivers[0].window_size is None


def test_driver_creation_retries(config):
    factory = CountingFactory(failures=4)
    provider = BrowserProvider(factory, config)

    provider.browse(lambda b: None, "retry")
    assert factory.calls == 5


def test_driver_creation_gives_up_after_five_tries(config):
    factory = CountingFactory(failures=5)
    provider = BrowserProvider(factory, config)

    with pytest.raises(ConnectionError):
        provider.browse(lambda b: None, "never")
    assert factory.calls == 5


def test_close_all_quits_every_browser(provider, factory):
    provider.browse(lambda b: None, "x")
    provider.close_all()
    assert factory.drivers[0].quit_calls == 1
    assert provider.browsers == []


def test_caller_name_is_filesystem_safe():
    assert caller_name("tests/browser/test_login.py::TestLogin::test_ok[chrome]") == (
        "tests_browser_test_login_py_TestLogin_test_ok[chrome]"
    )
