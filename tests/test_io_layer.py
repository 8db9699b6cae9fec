"""Unit tests for the IOLayer."""

import pytest

from image_update_checker.exceptions import ManifestError
from image_update_checker.io_layer import IOLayer
from image_update_checker.models import ImageName


class TestFileOperations:
    """Test reading manifests from disk."""

    def test_read_file(self, io_layer, sample_dockerfile):
        """Test reading an existing file."""
        assert io_layer.read_file(str(sample_dockerfile)).startswith("# image-update-checker")

    def test_read_missing_file(self, io_layer, tmp_path):
        """Test that a missing file reads as None."""
        assert io_layer.read_file(str(tmp_path / "missing")) is None

    def test_read_directory(self, io_layer, tmp_path):
        """Test that a directory is not a file."""
        assert io_layer.read_file(str(tmp_path)) is None

    def test_read_manifest_missing(self, io_layer, tmp_path):
        """Test that a missing manifest aborts the run."""
        with pytest.raises(ManifestError, match="Failed to find file"):
            io_layer.read_manifest(str(tmp_path / "Dockerfile"))

    def test_read_manifest_undecodable(self, io_layer, tmp_path):
        """Test that a binary file is reported as unreadable."""
        path = tmp_path / "Dockerfile"
        path.write_bytes(b"\xff\xfe\x00FROM")
        with pytest.raises(ManifestError, match="Failed to read file"):
            io_layer.read_manifest(str(path))


class TestRegistryOperations:
    """Test tag listing through the registry client."""

    def test_fetch_tags(self, io_layer, mock_registry_client):
        """Test that all tags are returned."""
        assert io_layer.fetch_tags(ImageName("alpine")) == ["latest", "3.15", "3.14"]
        mock_registry_client.fetch_tags.assert_called_once_with(ImageName("alpine"))

    def test_fetch_recent_tags(self, io_layer):
        """Test that only the newest tags are returned."""
        assert io_layer.fetch_recent_tags(ImageName("node"), 3) == ["latest", "16.3.0", "15.14.0"]

    def test_fetch_recent_tags_more_than_available(self, io_layer):
        """Test asking for more tags than exist."""
        assert io_layer.fetch_recent_tags(ImageName("alpine"), 25) == ["latest", "3.15", "3.14"]

    def test_fetch_recent_tags_stops_reading(self, mock_registry_client):
        """Test that the iterator is not drained past the requested amount."""
        consumed = []

        def iter_tags(image):
            for tag in ["3", "2", "1"]:
                consumed.append(tag)
                yield tag

        mock_registry_client.iter_tags.side_effect = iter_tags
        assert IOLayer(mock_registry_client).fetch_recent_tags(ImageName("app"), 2) == ["3", "2"]
        assert consumed == ["3", "2"]
