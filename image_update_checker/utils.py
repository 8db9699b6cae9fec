"""
Utility Functions Module for Image Update Checker

Functions:
    setup_logging: Configures application logging
    display_path: Renders a manifest path for reports
"""

import logging
from pathlib import Path


def setup_logging(level: int = logging.INFO) -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def display_path(path: str) -> str:
    """Return the absolute, normalized form of a path for display."""
    return str(Path(path).resolve())
