# browser_testing/cli.py
from __future__ import annotations

"""Command-line interface
------------------------
`config` prints the effective settings; `chromedriver` runs a local
chromedriver in the foreground for browser test sessions.
"""

import json
import time
from pathlib import Path
from typing import List, Optional

import click
from selenium.common.exceptions import WebDriverException

from browser_testing.drivers.chrome import ChromeProcess
from browser_testing.utils.config import get_settings
from browser_testing.utils.logger import get_logger, set_log_level


# -------- helpers --------


def _echo_json(obj) -> None:
    click.echo(json.dumps(obj, indent=2, ensure_ascii=False, default=str))


# -------- CLI root --------


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override LOG_LEVEL from settings",
)
@click.version_option(package_name="browser-testing")
def cli(log_level: Optional[str]):
    _ = get_settings()
    if log_level:
        set_log_level(log_level.upper())


# -------- commands --------


@cli.command("config")
def cmd_config():
    """Print effective configuration (after .env & env vars)."""
    s = get_settings()
    _echo_json(s.model_dump(mode="json"))


@cli.command("chromedriver")
@click.option("--path", "driver_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="chromedriver binary (default: CHROMEDRIVER_PATH, else let selenium locate it)")
@click.option("--port", type=int, default=None, help="Port to listen on (default: CHROMEDRIVER_PORT)")
@click.argument("arguments", nargs=-1)
def cmd_chromedriver(driver_path: Optional[Path], port: Optional[int], arguments: List[str]):
    """Run chromedriver in the foreground until interrupted."""
    log = get_logger("browser_testing.cli")
    try:
        process = ChromeProcess(driver=driver_path, port=port, arguments=list(arguments))
    except RuntimeError as e:
        raise click.ClickException(str(e))

    try:
        process.start()
    except WebDriverException as e:
        raise click.ClickException(f"Unable to start chromedriver: {e.msg}")

    click.echo(f"chromedriver running on port {process.port}. Press Ctrl+C to stop.")
    try:
        while process.running:
            time.sleep(1)
    except KeyboardInterrupt:
        log.info("Interrupted; stopping chromedriver")
    finally:
        process.stop()

    click.echo("chromedriver stopped.")


def main() -> None:
    cli(prog_name="browser-testing")


if __name__ == "__main__":
    main()
