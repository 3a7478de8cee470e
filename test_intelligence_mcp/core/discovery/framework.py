"""Detect the active test framework from project manifests."""

from __future__ import annotations

import json
import logging

from ...constants import DEFAULT_FRAMEWORK
from ..repository import Repository
from .models import TestFramework

logger = logging.getLogger(__name__)

# package.json dependency name -> framework, checked in this order
JS_FRAMEWORK_DEPENDENCIES: tuple[tuple[str, TestFramework], ...] = (
    ("vitest", "vitest"),
    ("jest", "jest"),
    ("mocha", "mocha"),
)

# Marker files checked after package.json, in this order
PROJECT_MARKERS: tuple[tuple[tuple[str, ...], TestFramework], ...] = (
    (("pytest.ini", "pyproject.toml", "setup.cfg", "tox.ini", "conftest.py"), "pytest"),
    (("go.mod",), "go-test"),
    (("pom.xml", "build.gradle", "build.gradle.kts"), "junit"),
)


def detect_framework(repository: Repository) -> TestFramework:
    """
    Infer the test framework for a repository.

    Detection is total: when no marker matches, the JavaScript default is
    returned instead of failing.
    """
    deps = _package_dependencies(repository)
    for dependency, framework in JS_FRAMEWORK_DEPENDENCIES:
        if dependency in deps:
            return framework

    for markers, framework in PROJECT_MARKERS:
        if any(repository.exists(marker) for marker in markers):
            return framework

    return DEFAULT_FRAMEWORK


def _package_dependencies(repository: Repository) -> set[str]:
    """Collect dependency names from package.json (empty on any problem)."""
    content = repository.read_text("package.json")
    if content is None:
        return set()

    try:
        package = json.loads(content)
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed package.json in %s", repository.root)
        return set()

    if not isinstance(package, dict):
        return set()

    names: set[str] = set()
    for section in ("dependencies", "devDependencies", "peerDependencies"):
        deps = package.get(section)
        if isinstance(deps, dict):
            names.update(deps)
    return names
