"""Check the PHP installation for a loaded coverage driver."""

from __future__ import annotations

import subprocess

from cloverlens.core.errors import EnvironmentUnavailableError

_CHECK_TIMEOUT_SEC = 30


def loaded_extensions(php_binary: str = "php") -> set[str]:
    """Return the lower-cased names listed by ``php -m``.

    Raises:
        EnvironmentUnavailableError: PHP cannot be run.
    """
    try:
        result = subprocess.run(
            [php_binary, "-m"],
            capture_output=True,
            text=True,
            timeout=_CHECK_TIMEOUT_SEC,
        )
    except FileNotFoundError as e:
        raise EnvironmentUnavailableError.php_missing(php_binary, "executable not found") from e
    except subprocess.TimeoutExpired as e:
        raise EnvironmentUnavailableError.php_missing(
            php_binary, f"'php -m' did not finish within {_CHECK_TIMEOUT_SEC}s"
        ) from e
    except OSError as e:
        raise EnvironmentUnavailableError.php_missing(php_binary, str(e)) from e

    if result.returncode != 0:
        raise EnvironmentUnavailableError.php_missing(
            php_binary, f"'php -m' exited with code {result.returncode}"
        )

    return {
        line.strip().lower()
        for line in result.stdout.splitlines()
        if line.strip() and not line.startswith("[")
    }


def ensure_coverage_driver(php_binary: str = "php", drivers: list[str] | None = None) -> str:
    """Return the first of *drivers* that PHP has loaded.

    Raises:
        EnvironmentUnavailableError: PHP is missing or no driver is loaded.
    """
    wanted = drivers or ["xdebug"]
    extensions = loaded_extensions(php_binary)
    for driver in wanted:
        if driver.lower() in extensions:
            return driver
    raise EnvironmentUnavailableError.driver_missing(wanted, php_binary)
