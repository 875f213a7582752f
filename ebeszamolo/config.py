"""Configuration management for ebeszamolo.

This module centralizes file-system paths, environment variables, and the
configuration loader used by the scraping and extraction pipeline.

Configuration file
------------------
``config/config.json`` holds everything that tracks the portal's wording rather
than the extraction algorithm:

* ``sources.e_beszamolo``: base URL, CSS selectors, timeouts and settle delays
* ``name_normalization``: legal-form suffixes stripped before name comparison
* ``table_parsing``: statement heading tokens, header-row labels, line-code pattern
* ``browserbase``: remote session API endpoint, viewport and fingerprint
* ``run``: default fiscal year, live-view hold period and wall-clock budget

Environment variables
---------------------
``DATA_DIR`` and ``LOGS_DIR`` override default directories; remote sessions rely
on ``BROWSERBASE_API_KEY`` and ``BROWSERBASE_PROJECT_ID``. Directories are created
eagerly on import so downstream callers can rely on their existence.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, cast

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = Path(os.getenv("DATA_DIR", PROJECT_ROOT / "data"))
LOGS_DIR = Path(os.getenv("LOGS_DIR", PROJECT_ROOT / "logs"))

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)

# API Keys
BROWSERBASE_API_KEY = os.getenv("BROWSERBASE_API_KEY", "")
BROWSERBASE_PROJECT_ID = os.getenv("BROWSERBASE_PROJECT_ID", "")


def get_config() -> dict[str, Any]:
    """Load the project configuration.

    Returns
    -------
    dict[str, Any]
        Parsed contents of ``config/config.json``.

    Raises
    ------
    FileNotFoundError
        If ``config/config.json`` is missing.
    json.JSONDecodeError
        If the file exists but is not valid JSON.
    """
    config_path = CONFIG_DIR / "config.json"
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with Path(config_path).open(encoding="utf-8") as f:
        return json.load(f)  # type: ignore[no-any-return]


def setup_logging(name: str = "ebeszamolo") -> logging.Logger:
    """Configure a console+file logger if not already present.

    Parameters
    ----------
    name : str, optional
        Logger namespace; reused to avoid duplicate handlers.

    Returns
    -------
    logging.Logger
        Logger with INFO-level console handler and DEBUG-level file handler
        under ``LOGS_DIR``.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(logging.DEBUG)

        # Console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_format = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        console_handler.setFormatter(console_format)
        logger.addHandler(console_handler)

        # File handler
        log_filename = f"{datetime.now(UTC).strftime('%Y-%m-%d')}_run.log"
        file_handler = logging.FileHandler(LOGS_DIR / log_filename, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_format = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger


def validate_api_keys() -> dict[str, bool]:
    """Report availability of optional third-party credentials.

    Returns
    -------
    dict[str, bool]
        Flags for ``browserbase_api_key`` and ``browserbase_project_id``.
    """
    return {
        "browserbase_api_key": bool(BROWSERBASE_API_KEY),
        "browserbase_project_id": bool(BROWSERBASE_PROJECT_ID),
    }


# =============================================================================
# Section Accessors
# =============================================================================


def get_source_config(config: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return the e-beszámoló portal section (URL, selectors, timeouts, delays).

    Parameters
    ----------
    config : dict[str, Any] | None, optional
        Preloaded config; when ``None`` it is fetched via :func:`get_config`.

    Returns
    -------
    dict[str, Any]
        Contents of ``sources.e_beszamolo``.
    """
    if config is None:
        config = get_config()
    return cast("dict[str, Any]", config["sources"]["e_beszamolo"])


def get_legal_suffixes(config: dict[str, Any] | None = None) -> list[str]:
    """Return the legal-form suffixes stripped from company names.

    Parameters
    ----------
    config : dict[str, Any] | None, optional
        Preloaded config; when ``None`` it is fetched via :func:`get_config`.

    Returns
    -------
    list[str]
        Suffixes without trailing periods (e.g. ``"Kft"``, ``"Nyrt"``).
    """
    if config is None:
        config = get_config()
    normalization = config.get("name_normalization", {})
    return cast("list[str]", normalization.get("legal_suffixes", []))


def get_table_parsing_config(config: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return statement heading tokens, header labels and the line-code pattern."""
    if config is None:
        config = get_config()
    return cast("dict[str, Any]", config.get("table_parsing", {}))


def get_browserbase_config(config: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return remote session settings (API URL, viewport, fingerprint)."""
    if config is None:
        config = get_config()
    return cast("dict[str, Any]", config.get("browserbase", {}))


def get_run_config(config: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return run defaults.

    Parameters
    ----------
    config : dict[str, Any] | None, optional
        Preloaded config; when ``None`` it is fetched via :func:`get_config`.

    Returns
    -------
    dict[str, Any]
        ``default_year``, ``hold_seconds`` and ``budget_seconds`` with
        fallbacks of ``2024``, ``5`` and ``60``.
    """
    if config is None:
        config = get_config()
    run_config = config.get("run", {})
    return {
        "default_year": int(run_config.get("default_year", 2024)),
        "hold_seconds": float(run_config.get("hold_seconds", 5)),
        "budget_seconds": float(run_config.get("budget_seconds", 60)),
    }
