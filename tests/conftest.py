"""
Pytest configuration and fixtures for scene_measure.

Provides:
- In-memory scene and session fixtures
- Builder/registry fixtures sharing one material library
- Logger reset between tests (setup_logging() disables propagation)
"""

import logging

import pytest

from scene_measure.annotation.builder import AnnotationBuilder
from scene_measure.annotation.primitives import MaterialLibrary
from scene_measure.logging_config import PACKAGE_LOGGER
from scene_measure.project_config import MeasurementOptions, StyleConfig
from scene_measure.registry import MeasurementRegistry
from scene_measure.scene import SceneGraph
from scene_measure.session import MeasurementSession


# ============================================================================
# Logging
# ============================================================================

@pytest.fixture(autouse=True)
def reset_package_logger():
    """Restore the package logger so caplog sees propagated records."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.filters.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ============================================================================
# Scene / session
# ============================================================================

@pytest.fixture
def scene() -> SceneGraph:
    """Empty in-memory scene."""
    return SceneGraph()


@pytest.fixture
def camera() -> object:
    """Opaque camera handle; the engine only stores it."""
    return object()


@pytest.fixture
def session(scene, camera) -> MeasurementSession:
    """Initialised and active session with default options."""
    s = MeasurementSession()
    s.init(scene, camera)
    s.activate()
    return s


# ============================================================================
# Builder / registry
# ============================================================================

@pytest.fixture
def options() -> MeasurementOptions:
    return MeasurementOptions()


@pytest.fixture
def materials() -> MaterialLibrary:
    return MaterialLibrary.from_style(StyleConfig())


@pytest.fixture
def builder(options, materials) -> AnnotationBuilder:
    return AnnotationBuilder(options, materials)


@pytest.fixture
def registry(scene, materials) -> MeasurementRegistry:
    return MeasurementRegistry(scene, materials)
