"""
Реестр завершённых измерений.

Упорядоченная коллекция (порядок вставки = порядок создания), адресация
только по индексу. Реестр владеет группами примитивов с момента add()
до удаления: при удалении группа убирается из сцены, её ресурсы
освобождаются, а ссылка в Measurement обнуляется.
"""

import logging
from typing import Any, Iterator, List, Optional

from scene_measure.annotation.primitives import MaterialLibrary
from scene_measure.measurement import Measurement

logger = logging.getLogger(__name__)


class MeasurementRegistry:
    """Коллекция измерений одной сессии."""

    def __init__(self, scene: Any, materials: Optional[MaterialLibrary] = None):
        self.scene = scene
        self.materials = materials
        self._items: List[Measurement] = []
        self.disposed = False

    def add(self, measurement: Measurement) -> None:
        """Добавить измерение в конец и показать его группу в сцене."""
        if measurement.group is not None:
            measurement.group.add_to_scene(self.scene)
        self._items.append(measurement)
        logger.debug("Measurement added", extra={
            "distance": measurement.distance,
            "count": len(self._items),
        })

    def remove_at(self, index: int) -> None:
        """Удалить измерение по индексу; индекс вне [0, len) — без действий."""
        if not 0 <= index < len(self._items):
            logger.debug("remove_at(%d) ignored, %d measurements", index, len(self._items))
            return
        self._release(self._items[index])
        del self._items[index]
        logger.debug("Measurement removed", extra={"index": index, "count": len(self._items)})

    def clear_all(self) -> None:
        """Удалить и освободить все измерения."""
        for measurement in self._items:
            self._release(measurement)
        removed = len(self._items)
        self._items = []
        if removed:
            logger.debug("Cleared %d measurements", removed)

    def rebind(self, scene: Any) -> None:
        """Перенести все группы в другую сцену (повторный init сессии)."""
        if scene is self.scene:
            return
        for measurement in self._items:
            if measurement.group is not None:
                measurement.group.remove_from_scene(self.scene)
                measurement.group.add_to_scene(scene)
        self.scene = scene
        logger.debug("Registry moved to a new scene", extra={"count": len(self._items)})

    def dispose(self) -> None:
        """clear_all() и освобождение разделяемых материалов (конец сессии)."""
        if self.disposed:
            return
        self.clear_all()
        if self.materials is not None:
            self.materials.dispose()
        self.disposed = True
        logger.debug("Registry disposed")

    def _release(self, measurement: Measurement) -> None:
        group = measurement.group
        if group is None:
            return
        group.remove_from_scene(self.scene)
        group.release_resources()
        measurement.group = None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Measurement]:
        return iter(list(self._items))

    def __getitem__(self, index: int) -> Measurement:
        return self._items[index]
