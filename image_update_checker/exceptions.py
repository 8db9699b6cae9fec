"""Custom exceptions for Image Update Checker."""


class UpdateCheckerError(Exception):
    """Base class for all errors raised by the checker."""


class PatternSyntaxError(UpdateCheckerError):
    """Raised when a version pattern cannot be compiled."""

    def __init__(self, message: str, pattern: str = None, position: int = None):
        self.pattern = pattern
        self.position = position
        super().__init__(message)


class CurrentTagMismatch(UpdateCheckerError):
    """Raised when the tag in use does not match its own pattern."""

    def __init__(self, tag: str, pattern: str):
        self.tag = tag
        self.pattern = pattern
        super().__init__(f"The current tag `{tag}` does not match the pattern `{pattern}`")


class RegistryError(UpdateCheckerError):
    """Raised when the registry cannot be queried for an image's tags."""

    def __init__(self, message: str, image: str = None):
        self.image = image
        super().__init__(message)


class ImageReferenceError(UpdateCheckerError):
    """Raised when an image reference cannot be parsed."""


class ManifestError(UpdateCheckerError):
    """Raised when a Dockerfile or compose manifest cannot be read or parsed.

    Unlike the other errors this one aborts the whole run.
    """
