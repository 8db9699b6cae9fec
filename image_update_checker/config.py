"""
Configuration Module for Image Update Checker

This module contains constants used throughout the application.

Constants:
    DEFAULT_REGISTRY_URL: Base URL of the Docker Hub API
    DEFAULT_NAMESPACE: Namespace of official Docker Hub images
    DEFAULT_TAG: Tag assumed when an image reference has none
    DIRECTIVE_MARKER: Word that marks a pattern directive comment
    DEFAULT_FETCH_AMOUNT: Number of tags listed by the fetch command
    EXIT_*: Process exit codes
"""

DEFAULT_REGISTRY_URL = "https://hub.docker.com"
DOCKER_HUB_HOSTS = {"docker.io", "index.docker.io", "registry-1.docker.io"}
DEFAULT_NAMESPACE = "library"
DEFAULT_TAG = "latest"
TAGS_PAGE_SIZE = 100

DIRECTIVE_MARKER = "image-update-checker"

DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_MAX_WORKERS = 4
DEFAULT_MAX_TAG_PAGES = 10
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_FETCH_AMOUNT = 25

# Exit codes
EXIT_OK = 0
EXIT_NO_UPDATE = 0
EXIT_COMPATIBLE_UPDATE = 1
EXIT_BREAKING_UPDATE = 2
EXIT_ERROR = 10
