"""
Environment Configuration Module

Handles parsing and validation of environment variables.
This is a pure module - no side effects, just data transformation.
"""

from dataclasses import dataclass, field
from typing import List, Dict
import logging

from .config import (
    DEFAULT_REGISTRY_URL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_MAX_WORKERS,
    DEFAULT_MAX_TAG_PAGES,
    DEFAULT_LOG_LEVEL,
    DIRECTIVE_MARKER,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class EnvironmentConfig:
    """Configuration parsed from environment variables."""

    registry_url: str = DEFAULT_REGISTRY_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    max_tag_pages: int = DEFAULT_MAX_TAG_PAGES
    directive_marker: str = DIRECTIVE_MARKER
    log_level: str = DEFAULT_LOG_LEVEL
    _parse_errors: List[str] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def from_env(cls, env: Dict[str, str]) -> "EnvironmentConfig":
        """Create configuration from environment variables.

        Args:
            env: Dictionary of environment variables (typically os.environ)

        Returns:
            EnvironmentConfig instance
        """
        parse_errors = []

        def number(name, default, convert):
            raw = env.get(name, "").strip()
            if not raw:
                return default
            try:
                return convert(raw)
            except ValueError:
                # Invalid value - will be reported in validation
                parse_errors.append(f"{name} must be a number, got '{raw}'")
                return default

        config = cls(
            registry_url=env.get("REGISTRY_URL", "").strip() or DEFAULT_REGISTRY_URL,
            request_timeout=number("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT, float),
            max_workers=number("MAX_WORKERS", DEFAULT_MAX_WORKERS, int),
            max_tag_pages=number("MAX_TAG_PAGES", DEFAULT_MAX_TAG_PAGES, int),
            directive_marker=env.get("DIRECTIVE_MARKER", "").strip() or DIRECTIVE_MARKER,
            log_level=env.get("LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper(),
        )
        config._parse_errors = parse_errors
        logger.debug(f"Configuration: {config}")
        return config

    def validate(self) -> List[str]:
        """Validate the configuration.

        Returns:
            List of error messages (empty if valid)
        """
        errors = list(self._parse_errors)

        if not self.registry_url.startswith(("http://", "https://")):
            errors.append(f"REGISTRY_URL must be an http(s) URL, got '{self.registry_url}'")

        if self.request_timeout <= 0:
            errors.append("REQUEST_TIMEOUT must be greater than 0")

        if self.max_workers < 1:
            errors.append("MAX_WORKERS must be at least 1")

        if self.max_tag_pages < 1:
            errors.append("MAX_TAG_PAGES must be at least 1")

        if any(c.isspace() for c in self.directive_marker):
            errors.append("DIRECTIVE_MARKER must be a single word")

        if self.log_level not in LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL '{self.log_level}'. "
                f"Valid options are: {', '.join(LOG_LEVELS)}"
            )

        return errors
