"""Tests for building check plans from manifests on disk."""

import pytest

from image_update_checker.exceptions import ManifestError
from image_update_checker.models import ManifestKind
from image_update_checker.plan_builder import prepare_plan


def test_dockerfile_plan(io_layer, sample_dockerfile):
    """Test that only references with a directive are planned."""
    plan = prepare_plan(ManifestKind.DOCKERFILE, str(sample_dockerfile), io_layer)

    assert [(str(r), r.pattern) for r in plan.references] == [
        ("node:14.17.0", "<!>.<>.<>"),
        ("nginx:1.21", "<>.<>"),
    ]
    assert plan.references[0].source == f"{sample_dockerfile}:2"
    assert [str(r) for r in plan.skipped] == ["alpine:3.14"]
    assert plan.failures == []
    assert plan.has_checks()


def test_default_pattern_fills_gaps(io_layer, sample_dockerfile):
    """Test that the command line pattern applies only where no directive exists."""
    plan = prepare_plan(ManifestKind.DOCKERFILE, str(sample_dockerfile), io_layer, default_pattern="<!>.<>")

    assert [(str(r), r.pattern) for r in plan.references] == [
        ("node:14.17.0", "<!>.<>.<>"),
        ("nginx:1.21", "<>.<>"),
        ("alpine:3.14", "<!>.<>"),
    ]
    assert plan.skipped == []


def test_custom_marker(io_layer, tmp_path):
    """Test that directives use the configured marker."""
    path = tmp_path / "Dockerfile"
    path.write_text('# updock --pattern "<>"\nFROM node:14\n', encoding="utf-8")

    assert prepare_plan(ManifestKind.DOCKERFILE, str(path), io_layer).references == []
    plan = prepare_plan(ManifestKind.DOCKERFILE, str(path), io_layer, marker="updock")
    assert [r.pattern for r in plan.references] == ["<>"]


def test_invalid_image_with_pattern_is_a_failure(io_layer, tmp_path):
    """Test that an unparseable image with a pattern is reported."""
    path = tmp_path / "Dockerfile"
    path.write_text(
        '# image-update-checker --pattern "<>"\nFROM quay.io/org/app:1\nFROM ${BASE}\n',
        encoding="utf-8",
    )
    plan = prepare_plan(ManifestKind.DOCKERFILE, str(path), io_layer)

    assert plan.references == []
    assert len(plan.failures) == 1
    assert plan.failures[0].subject == "quay.io/org/app:1"
    assert plan.failures[0].source == f"{path}:2"
    assert "Docker Hub" in plan.failures[0].error


def test_malformed_directive_is_planned(io_layer, tmp_path):
    """Test that a broken directive still produces a check that will fail."""
    path = tmp_path / "Dockerfile"
    path.write_text("# image-update-checker --pattern\nFROM node:14\n", encoding="utf-8")
    plan = prepare_plan(ManifestKind.DOCKERFILE, str(path), io_layer, default_pattern="<>")

    reference = plan.references[0]
    assert reference.pattern is None
    assert "Invalid directive" in reference.pattern_error


def test_compose_plan(io_layer, sample_compose):
    """Test image services and build contexts."""
    plan = prepare_plan(ManifestKind.COMPOSE, str(sample_compose), io_layer)

    assert [(str(r), r.pattern) for r in plan.references] == [
        ("postgres:13.4", "<!>.<>"),
        ("python:3.9-alpine", "<!>.<>-alpine"),
    ]
    assert plan.references[0].source == "service db"
    assert plan.references[1].source == f"service web {sample_compose.parent / 'web' / 'Dockerfile'}:2"
    assert [str(r) for r in plan.skipped] == ["redis:6.2.5"]


def test_compose_missing_build_dockerfile(io_layer, tmp_path):
    """Test that an unreadable build context fails only that service."""
    path = tmp_path / "docker-compose.yml"
    path.write_text(
        "services:\n"
        "  api:\n"
        "    build: ./api\n"
        "  db:\n"
        "    # image-update-checker --pattern '<!>.<>'\n"
        "    image: postgres:13.4\n",
        encoding="utf-8",
    )
    plan = prepare_plan(ManifestKind.COMPOSE, str(path), io_layer)

    assert [f.subject for f in plan.failures] == ["api"]
    assert plan.failures[0].error.startswith("Failed to read file")
    assert [str(r) for r in plan.references] == ["postgres:13.4"]


def test_compose_unsupported_service(io_layer, tmp_path):
    """Test that a service without build or image is a plan failure."""
    path = tmp_path / "docker-compose.yml"
    path.write_text("services:\n  alpine:\n    build:\n      args:\n        A: b\n", encoding="utf-8")
    plan = prepare_plan(ManifestKind.COMPOSE, str(path), io_layer)

    assert plan.failures[0].subject == "alpine"
    assert not plan.has_checks()


def test_missing_manifest(io_layer, tmp_path):
    """Test that a missing manifest aborts planning."""
    with pytest.raises(ManifestError):
        prepare_plan(ManifestKind.DOCKERFILE, str(tmp_path / "Dockerfile"), io_layer)
