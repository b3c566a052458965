"""
Построитель размерной аннотации по двум точкам.

Из (start, end) детерминированно создаёт:
  1. размерную линию start → end;
  2. две выносные линии, перпендикулярные размерной (зазор + выход);
  3. две стрелки, направленные вдоль линии;
  4. надпись с расстоянием в середине отрезка.

Длины выносных и размер стрелок — константы, а не доли расстояния,
поэтому визуальный вес аннотации не зависит от длины измерения.
"""

import logging
import math
from typing import Optional

from scene_measure import config as cfg
from scene_measure.annotation.label import LabelTexture, format_distance, place_label
from scene_measure.annotation.primitives import (
    ArrowheadPrimitive,
    DimensionGroup,
    LinePrimitive,
    LabelPrimitive,
    Material,
    MaterialLibrary,
)
from scene_measure.geometry.vector import (
    PointLike,
    angle_degrees,
    as_point,
    distance,
    look_at_rotation,
    midpoint,
    perpendicular,
    rotation_z,
)
from scene_measure.logging_config import timed
from scene_measure.measurement import Measurement
from scene_measure.project_config import MeasurementOptions, StyleConfig

logger = logging.getLogger(__name__)


class AnnotationBuilder:
    """Синтез набора примитивов для одного измерения.

    Разделяемые материалы берутся из MaterialLibrary; собственные ресурсы
    (буферы, материал и текстура надписи) создаются для каждой группы.
    """

    def __init__(
        self,
        options: Optional[MeasurementOptions] = None,
        materials: Optional[MaterialLibrary] = None,
        style: Optional[StyleConfig] = None,
    ):
        self.options = options or MeasurementOptions()
        self.style = style or StyleConfig()
        self.materials = materials or MaterialLibrary.from_style(self.style)

    @timed(operation="build dimension group")
    def build(self, start: PointLike, end: PointLike) -> Measurement:
        """Построить измерение.

        Args:
            start: первая точка.
            end: вторая точка, start != end (проверяет вызывающая сторона).

        Returns:
            Measurement с заполненной группой примитивов.
        """
        a = as_point(start)
        b = as_point(end)
        dist = distance(a, b)
        direction = b - a
        line_angle = angle_degrees(a, b)

        main_line = LinePrimitive([a, b], self.materials.dimension, name="dimension")

        perp = perpendicular(direction)
        ext_a = self._extension_line(a, perp)
        ext_b = self._extension_line(b, perp)

        arrow_a = self._arrowhead(a, direction, line_angle)
        arrow_b = self._arrowhead(b, -direction, line_angle + 180.0)

        label = self._label(format_distance(dist), midpoint(a, b), line_angle)

        group = DimensionGroup(
            main_line=main_line,
            extension_lines=(ext_a, ext_b),
            arrowheads=(arrow_a, arrow_b),
            label=label,
            metadata={
                'start_point': a,
                'end_point': b,
                'distance': dist,
                'line_angle': line_angle,
            },
        )

        logger.debug("Dimension built", extra={
            "distance": dist,
            "line_angle": line_angle,
        })
        return Measurement(start_point=a, end_point=b, distance=dist, group=group)

    # ------------------------------------------------------------------
    # Части аннотации
    # ------------------------------------------------------------------

    def _extension_line(self, point, perp) -> LinePrimitive:
        """Выносная линия: от -(зазор + выход) до +зазор вдоль перпендикуляра."""
        offset = self.options.extension_offset
        length = offset + self.options.extension_overshoot
        return LinePrimitive(
            [point - perp * length, point + perp * offset],
            self.materials.extension,
            name="extension",
        )

    def _arrowhead(self, position, direction, roll_deg: float) -> ArrowheadPrimitive:
        """Стрелка: сначала ориентация вдоль direction, затем поворот на roll_deg."""
        size = self.options.arrowhead_size
        half_angle = math.radians(self.options.arrowhead_angle_degrees)
        local = [
            (0.0, 0.0, 0.0),
            (size * math.cos(half_angle), size * math.sin(half_angle), 0.0),
            (size * math.cos(half_angle), -size * math.sin(half_angle), 0.0),
        ]
        rotation = look_at_rotation(direction) @ rotation_z(roll_deg)
        return ArrowheadPrimitive(position, rotation, local, self.materials.arrowhead)

    def _label(self, text: str, anchor, line_angle: float) -> LabelPrimitive:
        position, rotation = place_label(anchor, line_angle, self.options.label_offset)
        texture = LabelTexture(
            text,
            font_size=self.options.label_font_size,
            padding=self.options.label_padding,
            corner_radius=self.options.label_corner_radius,
            text_color=self.style.label_text_color,
            background_color=self.style.label_background_color,
            background_opacity=self.style.label_background_opacity,
        )
        material = Material('label', self.style.label_text_color)
        return LabelPrimitive(
            text=text,
            position=position,
            rotation_z=rotation,
            scale=cfg.LABEL_SCALE,
            material=material,
            texture=texture,
        )
