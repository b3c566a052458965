"""
scene_measure — интерактивные размерные аннотации поверх 3D-сцены.

Хост передаёт точки в мировых координатах и флаги модификаторов
в MeasurementSession; сессия строит размерные линии в стиле САПР.
"""

from scene_measure.logging_config import (
    LogContext,
    configure_from,
    get_logger,
    log_timing,
    setup_logging,
    timed,
)
from scene_measure.measurement import Measurement
from scene_measure.project_config import MeasurementOptions, ProjectConfig, load_config
from scene_measure.registry import MeasurementRegistry
from scene_measure.scene import SceneGraph
from scene_measure.session import InteractionState, MeasurementSession

__all__ = [
    "InteractionState",
    "LogContext",
    "Measurement",
    "MeasurementOptions",
    "MeasurementRegistry",
    "MeasurementSession",
    "ProjectConfig",
    "SceneGraph",
    "configure_from",
    "get_logger",
    "load_config",
    "log_timing",
    "setup_logging",
    "timed",
]
