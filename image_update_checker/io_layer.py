"""
I/O Layer for Image Update Checker

This module contains all I/O operations (file system, registry)
separated from business logic. This is the "imperative shell" that
handles all side effects.
"""

import logging
from itertools import islice
from pathlib import Path
from typing import List, Optional

from .exceptions import ManifestError
from .models import ImageName
from .registry_client import DockerHubClient

logger = logging.getLogger(__name__)


class IOLayer:
    """Handles all I/O operations for the application."""

    def __init__(self, registry_client: DockerHubClient):
        """Initialize the I/O layer.

        Args:
            registry_client: Client used to list image tags
        """
        self.registry_client = registry_client

    # -----------------------------------------------------------------------------
    # File System Operations
    # -----------------------------------------------------------------------------

    def read_file(self, path: str) -> Optional[str]:
        """Read a text file.

        Args:
            path: Path to the file

        Returns:
            File content as string or None if file doesn't exist
        """
        file_path = Path(path)
        if not file_path.is_file():
            return None

        with file_path.open(encoding="utf-8") as f:
            return f.read()

    def read_manifest(self, path: str) -> str:
        """Read the manifest a run was started with.

        Args:
            path: Path to the Dockerfile or compose file

        Returns:
            File content as string

        Raises:
            ManifestError: If the file is missing or unreadable
        """
        try:
            content = self.read_file(path)
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestError(f"Failed to read file `{path}`: {e}") from e

        if content is None:
            raise ManifestError(f"Failed to find file `{path}`")
        return content

    # -----------------------------------------------------------------------------
    # Registry Operations
    # -----------------------------------------------------------------------------

    def fetch_tags(self, image: ImageName) -> List[str]:
        """List all tags published for an image.

        Raises:
            RegistryError: If the registry cannot be queried
        """
        logger.debug(f"Fetching tags for {image}")
        return self.registry_client.fetch_tags(image)

    def fetch_recent_tags(self, image: ImageName, amount: int) -> List[str]:
        """List the newest tags of an image, at most `amount` of them."""
        return list(islice(self.registry_client.iter_tags(image), amount))
