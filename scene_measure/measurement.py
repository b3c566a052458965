"""Завершённое измерение и его состояние ожидания."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from scene_measure.geometry.vector import Point3

if TYPE_CHECKING:
    # annotation.builder imports this module
    from scene_measure.annotation.primitives import DimensionGroup, LinePrimitive


@dataclass(eq=False)
class Measurement:
    """Измерение между двумя точками.

    Attributes:
        start_point: начальная точка (неизменяемая копия).
        end_point: конечная точка после привязки (неизменяемая копия).
        distance: |end_point - start_point| на момент построения, не пересчитывается.
        group: примитивы размера; None после освобождения реестром.
    """
    start_point: Point3
    end_point: Point3
    distance: float
    group: Optional['DimensionGroup'] = None

    @property
    def label_text(self) -> Optional[str]:
        if self.group is None:
            return None
        return self.group.label.text

    @property
    def is_released(self) -> bool:
        return self.group is None


@dataclass(eq=False)
class PendingMeasurement:
    """Первая точка зафиксирована, показывается линия предпросмотра."""
    start_point: Point3
    preview: 'LinePrimitive'
