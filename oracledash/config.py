"""
Application configuration.

Loads settings from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ConfigurationError
from .types import TrackedPair

DEFAULT_PAIRS = "ETH/USD,BTC/USD,ETH/BNB"


def parse_pairs(text: str) -> tuple[TrackedPair, ...]:
    """Parse a comma separated "BASE/QUOTE" list."""
    return tuple(TrackedPair.parse(item) for item in text.split(",") if item.strip())


@dataclass
class DashboardConfig:
    """Dashboard configuration."""

    # URLs
    oracle_url: str = "https://ai-price-oracle.onrender.com/price"
    explorer_base_url: str = "https://sepolia.etherscan.io/tx/"

    # Polling
    poll_interval_s: float = 10.0
    fetch_timeout_s: float = 5.0

    # Display
    tracked_pairs: tuple[TrackedPair, ...] = field(
        default_factory=lambda: parse_pairs(DEFAULT_PAIRS)
    )
    display_tz: str = ""  # IANA zone name, empty for local time

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "DashboardConfig":
        """
        Load config from environment variables.

        Raises:
            ConfigurationError: if TRACKED_PAIRS or a number cannot be parsed
        """
        try:
            return cls(
                oracle_url=os.getenv("ORACLE_URL", "https://ai-price-oracle.onrender.com/price"),
                explorer_base_url=os.getenv(
                    "EXPLORER_BASE_URL",
                    "https://sepolia.etherscan.io/tx/",
                ),
                poll_interval_s=float(os.getenv("POLL_INTERVAL_S", "10")),
                fetch_timeout_s=float(os.getenv("FETCH_TIMEOUT_S", "5")),
                tracked_pairs=parse_pairs(os.getenv("TRACKED_PAIRS", DEFAULT_PAIRS)),
                display_tz=os.getenv("DISPLAY_TZ", ""),
                log_level=os.getenv("LOG_LEVEL", "INFO"),
            )
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

    @classmethod
    def from_env_file(cls, path: str) -> "DashboardConfig":
        """
        Load config from .env file, then environment variables.

        Environment variables override file values.
        """
        if os.path.exists(path):
            with open(path) as f:
                for line in f:
                    line = line.strip()
                    if not line or line.startswith("#"):
                        continue
                    if "=" in line:
                        key, value = line.split("=", 1)
                        key = key.strip()
                        value = value.strip().strip("'\"")
                        if key not in os.environ:
                            os.environ[key] = value

        return cls.from_env()

    def display_zone(self) -> Optional[tzinfo]:
        """Display zone, or None for local time."""
        if not self.display_tz:
            return None
        return ZoneInfo(self.display_tz)

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if not self.oracle_url:
            errors.append("ORACLE_URL is required")

        if not self.explorer_base_url:
            errors.append("EXPLORER_BASE_URL is required")

        if self.poll_interval_s <= 0:
            errors.append("POLL_INTERVAL_S must be positive")

        if self.fetch_timeout_s <= 0:
            errors.append("FETCH_TIMEOUT_S must be positive")

        if not self.tracked_pairs:
            errors.append("TRACKED_PAIRS must list at least one pair")
        elif len(set(self.tracked_pairs)) != len(self.tracked_pairs):
            errors.append("TRACKED_PAIRS contains duplicates")

        if self.display_tz:
            try:
                ZoneInfo(self.display_tz)
            except (ZoneInfoNotFoundError, ValueError):
                errors.append(f"DISPLAY_TZ {self.display_tz!r} is not a known time zone")

        return errors
