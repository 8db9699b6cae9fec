"""
Registry Client for Image Update Checker

Lists the tags published for an image on Docker Hub. Tags are yielded page by
page, newest first, so callers that only need a few of them stop early.
"""

import logging
from typing import Iterator, List, Optional

import requests

from .config import (
    DEFAULT_REGISTRY_URL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_MAX_TAG_PAGES,
    TAGS_PAGE_SIZE,
)
from .exceptions import RegistryError
from .models import ImageName

logger = logging.getLogger(__name__)


class DockerHubClient:
    """Minimal client for the Docker Hub tag listing API."""

    def __init__(
        self,
        registry_url: str = DEFAULT_REGISTRY_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        max_pages: int = DEFAULT_MAX_TAG_PAGES,
        session: Optional[requests.Session] = None
    ):
        self.registry_url = registry_url.rstrip("/")
        self.timeout = timeout
        self.max_pages = max_pages
        self.session = session or requests.Session()

    def tags_url(self, image: ImageName) -> str:
        return (
            f"{self.registry_url}/v2/repositories/{image.registry_path}/tags"
            f"?page_size={TAGS_PAGE_SIZE}&ordering=last_updated"
        )

    def iter_tags(self, image: ImageName) -> Iterator[str]:
        """
        Yield the tags of an image, newest first.

        Args:
            image: The image to list

        Yields:
            Tag names

        Raises:
            RegistryError: On transport errors, unexpected status codes or
                malformed responses
        """
        url = self.tags_url(image)
        pages = 0

        while url and pages < self.max_pages:
            data = self._get_page(image, url)
            pages += 1
            for name in self._tag_names(image, data):
                yield name
            url = data.get("next")
            if url is not None and not isinstance(url, str):
                raise self._invalid_response(image)

        if url:
            logger.info(f"Stopped listing tags of {image} after {pages} pages")

    def fetch_tags(self, image: ImageName) -> List[str]:
        """Return all tags of an image, newest first."""
        tags = list(self.iter_tags(image))
        logger.debug(f"Fetched {len(tags)} tags for {image}")
        return tags

    @staticmethod
    def _invalid_response(image: ImageName) -> RegistryError:
        return RegistryError(f"Docker Hub returned an invalid response for `{image}`", image=str(image))

    def _tag_names(self, image: ImageName, data: dict) -> List[str]:
        """Tag names of one page; entries without a name are skipped."""
        results = data.get("results") or []
        if not isinstance(results, list):
            raise self._invalid_response(image)

        names = []
        for result in results:
            if not isinstance(result, dict):
                raise self._invalid_response(image)
            name = result.get("name")
            if name is not None and not isinstance(name, str):
                raise self._invalid_response(image)
            if name:
                names.append(name)
        return names

    def _get_page(self, image: ImageName, url: str) -> dict:
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise RegistryError(f"Failed to fetch tags for `{image}`: {e}", image=str(image)) from e

        if response.status_code == 404:
            raise RegistryError(f"The image `{image}` was not found on Docker Hub", image=str(image))
        if response.status_code != 200:
            raise RegistryError(
                f"Failed to fetch tags for `{image}` (status code {response.status_code})",
                image=str(image),
            )

        try:
            data = response.json()
        except ValueError as e:
            raise self._invalid_response(image) from e
        if not isinstance(data, dict):
            raise self._invalid_response(image)
        return data
