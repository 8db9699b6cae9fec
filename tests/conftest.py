"""Test fixtures for Image Update Checker.

This module provides shared fixtures used across multiple test modules.
It sets up manifests on disk and a fake registry so that checks run
without any network access.

Fixtures:
    registry_tags: Tags published per image in the fake registry
    io_layer: IOLayer backed by the fake registry
    sample_dockerfile: A Dockerfile with pattern directives
    sample_compose: A compose file with image and build services
"""

from unittest.mock import Mock

import pytest

from image_update_checker.exceptions import RegistryError
from image_update_checker.io_layer import IOLayer
from image_update_checker.registry_client import DockerHubClient


DOCKERFILE = """\
# image-update-checker --pattern "<!>.<>.<>"
FROM node:14.17.0 AS build
RUN npm ci

FROM build AS test

# image-update-checker --pattern "<>.<>"
FROM --platform=linux/amd64 nginx:1.21
FROM scratch
FROM alpine:3.14
"""

COMPOSE = """\
services:
  db:
    # image-update-checker --pattern "<!>.<>"
    image: postgres:13.4
  cache:
    image: "redis:6.2.5"
  web:
    build: ./web
"""

WEB_DOCKERFILE = """\
# image-update-checker --pattern "<!>.<>-alpine"
FROM python:3.9-alpine
"""


@pytest.fixture
def registry_tags():
    """Tags published per image path, newest first like Docker Hub."""
    return {
        "library/node": ["latest", "16.3.0", "15.14.0", "14.18.1", "14.17.6", "14.17.0", "14.16.1"],
        "library/nginx": ["latest", "1.21", "1.21.3", "1.20", "stable"],
        "library/alpine": ["latest", "3.15", "3.14"],
        "library/postgres": ["latest", "14.0", "13.5", "13.4", "13"],
        "library/redis": ["latest", "6.2.6", "6.2.5"],
        "library/python": ["3.10-alpine", "3.9-alpine", "3.9-slim", "3.8-alpine"],
    }


@pytest.fixture
def mock_registry_client(registry_tags):
    """A DockerHubClient mock answering from registry_tags.

    Unknown images raise RegistryError like a 404 would.
    """
    client = Mock(spec=DockerHubClient)

    def iter_tags(image):
        if image.registry_path not in registry_tags:
            raise RegistryError(f"The image `{image}` was not found on Docker Hub", image=str(image))
        return iter(registry_tags[image.registry_path])

    client.iter_tags.side_effect = iter_tags
    client.fetch_tags.side_effect = lambda image: list(iter_tags(image))
    return client


@pytest.fixture
def io_layer(mock_registry_client):
    """IOLayer backed by the fake registry."""
    return IOLayer(mock_registry_client)


@pytest.fixture
def sample_dockerfile(tmp_path):
    """Creates a Dockerfile with two pattern directives.

    Returns:
        Path: Path to the Dockerfile
    """
    path = tmp_path / "Dockerfile"
    path.write_text(DOCKERFILE, encoding="utf-8")
    return path


@pytest.fixture
def sample_compose(tmp_path):
    """Creates a compose project:

    tmp_path/
    ├── docker-compose.yml
    └── web/
        └── Dockerfile

    Returns:
        Path: Path to docker-compose.yml
    """
    web_dir = tmp_path / "web"
    web_dir.mkdir()
    (web_dir / "Dockerfile").write_text(WEB_DOCKERFILE, encoding="utf-8")

    path = tmp_path / "docker-compose.yml"
    path.write_text(COMPOSE, encoding="utf-8")
    return path
