"""
Configuration loading utilities.

Loads environment variables from `.env` and validates the simulation
settings. Invalid values fall back to their defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv, find_dotenv
from streamlit.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_SIMULATION_SEC = 24 * 3600
DEFAULT_DISPLAY_LOCALE = "fr_FR"


@dataclass(frozen=True)
class Config:
    max_simulation_sec: int = DEFAULT_MAX_SIMULATION_SEC
    display_locale: str = DEFAULT_DISPLAY_LOCALE


def load_config() -> Config:
    """Load configuration from environment."""
    load_dotenv(find_dotenv(), override=True)

    max_sim_str = os.getenv("MAX_SIMULATION_SEC", str(DEFAULT_MAX_SIMULATION_SEC))
    try:
        max_simulation_sec = int(max_sim_str)
    except (ValueError, TypeError):
        max_simulation_sec = DEFAULT_MAX_SIMULATION_SEC
    if max_simulation_sec <= 0:
        logger.warning("MAX_SIMULATION_SEC must be positive, got %s", max_sim_str)
        max_simulation_sec = DEFAULT_MAX_SIMULATION_SEC

    display_locale = os.getenv("DISPLAY_LOCALE") or DEFAULT_DISPLAY_LOCALE
    logger.debug(
        "MAX_SIMULATION_SEC: %s, DISPLAY_LOCALE: %s", max_simulation_sec, display_locale
    )

    return Config(
        max_simulation_sec=max_simulation_sec,
        display_locale=display_locale,
    )
