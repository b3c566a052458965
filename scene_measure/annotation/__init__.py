"""
Синтез размерных аннотаций.

Модули:
  - primitives: примитивы, ресурсы, группа размера, разделяемые материалы
  - label:      текст, таблица размещения и текстура надписи
  - builder:    построитель группы по двум точкам
"""

from scene_measure.annotation.builder import AnnotationBuilder
from scene_measure.annotation.label import (
    LABEL_PLACEMENT_TABLE,
    LabelPlacementRule,
    LabelTexture,
    OffsetAxis,
    format_distance,
    place_label,
    select_label_placement,
)
from scene_measure.annotation.primitives import (
    ArrowheadPrimitive,
    DimensionGroup,
    GeometryBuffer,
    LabelPrimitive,
    LinePrimitive,
    Material,
    MaterialLibrary,
)

__all__ = [
    'AnnotationBuilder',
    'ArrowheadPrimitive',
    'DimensionGroup',
    'GeometryBuffer',
    'LABEL_PLACEMENT_TABLE',
    'LabelPlacementRule',
    'LabelPrimitive',
    'LabelTexture',
    'LinePrimitive',
    'Material',
    'MaterialLibrary',
    'OffsetAxis',
    'format_distance',
    'place_label',
    'select_label_placement',
]
