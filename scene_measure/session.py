"""
Интерактивная сессия измерения (конечный автомат двух щелчков).

Состояния:
  IDLE    — нет начальной точки;
  PENDING — начальная точка зафиксирована, линия предпросмотра следует
            за указателем.

Переходы:
  IDLE    --щелчок-->          PENDING
  PENDING --щелчок-->          IDLE (измерение создано)
  PENDING --отмена/Escape-->   IDLE
  любое   --deactivate-->      IDLE, неактивна

Сессия — явный объект-контекст: хост создаёт её один раз при запуске
и передаёт во все обработчики ввода. Точки приходят уже в мировых
координатах, модификаторы — булевыми флагами. Все операции синхронные.
"""

import logging
import uuid
from enum import Enum
from typing import Any, List, Optional

from scene_measure.annotation.builder import AnnotationBuilder
from scene_measure.annotation.primitives import LinePrimitive, MaterialLibrary
from scene_measure.errors import SessionDisposedError, SessionNotInitializedError
from scene_measure.geometry.vector import Point3, PointLike, as_point, snap_to_increment
from scene_measure.logging_config import LogContext
from scene_measure.measurement import Measurement, PendingMeasurement
from scene_measure.project_config import MeasurementOptions, ProjectConfig, StyleConfig
from scene_measure.registry import MeasurementRegistry

logger = logging.getLogger(__name__)

CANCEL_KEYS = frozenset({"Escape"})


class InteractionState(Enum):
    """Состояние автомата измерения."""
    IDLE = "idle"
    PENDING = "pending"


class MeasurementSession:
    """Сессия измерения расстояний в сцене хоста.

    Example:
        session = MeasurementSession()
        session.init(scene, camera)
        session.activate()
        session.handle_click((0, 0, 0))
        session.handle_pointer_move((2, 0, 0))
        session.handle_click((3, 4, 0))   # → Measurement(distance=5.0)
    """

    def __init__(
        self,
        options: Optional[MeasurementOptions] = None,
        style: Optional[StyleConfig] = None,
    ):
        self.options = options or MeasurementOptions()
        self.options.validate()
        self.style = style or StyleConfig()
        self.session_id = uuid.uuid4().hex[:8]

        self.scene: Any = None
        self.camera: Any = None
        self.is_active = False
        self.current_pointer: Optional[Point3] = None

        self.materials = MaterialLibrary.from_style(self.style)
        self.builder = AnnotationBuilder(self.options, self.materials, self.style)
        self.registry: Optional[MeasurementRegistry] = None
        self._pending: Optional[PendingMeasurement] = None

    @classmethod
    def from_config(cls, config: ProjectConfig) -> 'MeasurementSession':
        """Создать сессию по загруженной конфигурации."""
        return cls(options=config.options, style=config.style)

    # ------------------------------------------------------------------
    # Жизненный цикл
    # ------------------------------------------------------------------

    def init(self, scene: Any, camera: Any) -> None:
        """Подключить сцену и камеру хоста.

        Повторный вызов отменяет незавершённое измерение в старой сцене
        и переносит существующие измерения в новую.
        """
        if self.registry is not None:
            logger.warning("Session %s re-initialised", self.session_id)
            self.cancel_measurement()
            self.registry.rebind(scene)
        else:
            self.registry = MeasurementRegistry(scene, self.materials)
        self.scene = scene
        self.camera = camera
        logger.debug("Session initialised", extra={"session_id": self.session_id})

    def activate(self) -> None:
        if self.materials.disposed:
            raise SessionDisposedError("Session disposed; create a new MeasurementSession.")
        if self.registry is None:
            raise SessionNotInitializedError(
                "Session not initialised. Call init(scene, camera) first.")
        self.is_active = True
        logger.debug("Measurement tool activated", extra={"session_id": self.session_id})

    def deactivate(self) -> None:
        """Выключить обработку ввода и отменить незавершённое измерение."""
        self.is_active = False
        self.cancel_measurement()
        logger.debug("Measurement tool deactivated", extra={"session_id": self.session_id})

    def dispose(self) -> None:
        """Освободить все ресурсы сессии (только при завершении работы)."""
        with LogContext(session_id=self.session_id):
            self.cancel_measurement()
            if self.registry is not None:
                self.registry.dispose()
            else:
                self.materials.dispose()
            self.is_active = False

    # ------------------------------------------------------------------
    # Состояние
    # ------------------------------------------------------------------

    @property
    def state(self) -> InteractionState:
        return InteractionState.PENDING if self._pending is not None else InteractionState.IDLE

    @property
    def start_point(self) -> Optional[Point3]:
        return self._pending.start_point if self._pending is not None else None

    @property
    def preview(self) -> Optional[LinePrimitive]:
        return self._pending.preview if self._pending is not None else None

    @property
    def measurements(self) -> List[Measurement]:
        if self.registry is None:
            return []
        return list(self.registry)

    # ------------------------------------------------------------------
    # Ввод
    # ------------------------------------------------------------------

    def handle_pointer_move(self, point: PointLike) -> None:
        """Обновить конец линии предпросмотра (начальная точка не меняется)."""
        if not self.is_active:
            return
        p = as_point(point)
        self.current_pointer = p

        if self._pending is None:
            return
        self._pending.preview.set_points([self._pending.start_point, p])

    def handle_click(
        self,
        point: PointLike,
        snap_coarse: bool = False,
        snap_fine: bool = False,
    ) -> Optional[Measurement]:
        """Обработать щелчок.

        Первый щелчок фиксирует начальную точку, второй завершает измерение.
        snap_coarse (Shift) важнее snap_fine (Ctrl), если заданы оба.

        Returns:
            Созданное измерение при завершении, иначе None.
        """
        if not self.is_active:
            return None

        with LogContext(session_id=self.session_id):
            if self._pending is None:
                self._start(as_point(point))
                return None
            return self._complete(as_point(point), snap_coarse, snap_fine)

    def handle_key(self, key: str) -> None:
        """Клавиатура хоста: Escape отменяет незавершённое измерение."""
        if key in CANCEL_KEYS:
            self.cancel_measurement()

    def cancel_measurement(self) -> None:
        """Убрать предпросмотр и сбросить начальную точку (в IDLE — без действий)."""
        pending = self._pending
        if pending is None:
            return
        self._pending = None
        if self.scene is not None:
            self.scene.remove(pending.preview)
        pending.preview.release()
        logger.debug("Pending measurement cancelled")

    # ------------------------------------------------------------------
    # Реестр
    # ------------------------------------------------------------------

    def remove_measurement(self, index: int) -> None:
        if self.registry is not None:
            self.registry.remove_at(index)

    def clear_all_measurements(self) -> None:
        if self.registry is not None:
            self.registry.clear_all()

    # ------------------------------------------------------------------
    # Переходы
    # ------------------------------------------------------------------

    def _start(self, p: Point3) -> None:
        preview = LinePrimitive([p, p], self.materials.preview, name="preview")
        self.scene.add(preview)
        self._pending = PendingMeasurement(start_point=p, preview=preview)
        logger.debug("Measurement started", extra={"start": p.tolist()})

    def _complete(self, p: Point3, snap_coarse: bool, snap_fine: bool) -> Optional[Measurement]:
        start = self._pending.start_point
        end = p
        if snap_coarse:
            end = snap_to_increment(start, p, self.options.coarse_snap_step)
        elif snap_fine:
            end = snap_to_increment(start, p, self.options.fine_snap_step)

        measurement = None
        if (end == start).all():
            logger.debug("Zero-length measurement skipped")
        else:
            measurement = self.builder.build(start, end)
            self.registry.add(measurement)

        self.cancel_measurement()
        return measurement
