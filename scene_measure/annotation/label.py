"""
Размерная надпись: текст, размещение относительно линии и текстура.

Размещение задаётся упорядоченной таблицей корзин угла линии.
Угол приводится усечённым остатком (знак сохраняется), поэтому
отрицательные углы попадают в корзину по умолчанию.

Содержит:
- format_distance         — текст надписи ("5.00 m")
- LABEL_PLACEMENT_TABLE   — таблица корзин угла
- select_label_placement  — выбор правила по углу
- place_label             — позиция и поворот надписи
- LabelTexture            — растр надписи (SVG через svgwrite)
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np
import svgwrite

from scene_measure import config as cfg
from scene_measure.geometry.vector import Point3, PointLike, as_point

logger = logging.getLogger(__name__)


def format_distance(value: float, unit: str = cfg.DISTANCE_UNIT,
                    decimals: int = cfg.LABEL_DECIMALS) -> str:
    """Текст надписи: значение с фиксированной точностью и единица."""
    return f"{value:.{decimals}f} {unit}"


# ---------------------------------------------------------------------------
# Таблица размещения
# ---------------------------------------------------------------------------

class OffsetAxis(Enum):
    """Направление смещения надписи от размерной линии."""
    NONE = "none"
    UP = "up"          # +Y
    SIDE = "side"      # +X


_AXIS_VECTORS = {
    OffsetAxis.NONE: (0.0, 0.0, 0.0),
    OffsetAxis.UP: (0.0, 1.0, 0.0),
    OffsetAxis.SIDE: (1.0, 0.0, 0.0),
}


@dataclass(frozen=True)
class LabelPlacementRule:
    """Правило для углов в [min_deg, max_deg).

    Attributes:
        rotate_with_line: повернуть надпись на угол линии (иначе горизонтально).
        offset_axis: направление смещения надписи.
    """
    min_deg: float
    max_deg: float
    rotate_with_line: bool
    offset_axis: OffsetAxis

    def matches(self, angle: float) -> bool:
        return self.min_deg <= angle < self.max_deg


LABEL_PLACEMENT_TABLE: Tuple[LabelPlacementRule, ...] = (
    LabelPlacementRule(0.0, 30.0, rotate_with_line=False, offset_axis=OffsetAxis.UP),
    LabelPlacementRule(30.0, 60.0, rotate_with_line=True, offset_axis=OffsetAxis.UP),
    LabelPlacementRule(60.0, 90.0, rotate_with_line=False, offset_axis=OffsetAxis.SIDE),
)

DEFAULT_LABEL_PLACEMENT = LabelPlacementRule(
    -math.inf, math.inf, rotate_with_line=False, offset_axis=OffsetAxis.NONE,
)


def select_label_placement(line_angle: float) -> LabelPlacementRule:
    """Первое подходящее правило таблицы или правило по умолчанию."""
    angle = math.fmod(line_angle, 360.0)
    for rule in LABEL_PLACEMENT_TABLE:
        if rule.matches(angle):
            return rule
    return DEFAULT_LABEL_PLACEMENT


def place_label(
    anchor: PointLike,
    line_angle: float,
    offset: float = cfg.LABEL_OFFSET,
) -> Tuple[Point3, float]:
    """Позиция и поворот надписи (радианы вокруг Z).

    Args:
        anchor: середина размерной линии.
        line_angle: угол линии (градусы).
        offset: величина смещения от линии.
    """
    rule = select_label_placement(line_angle)
    shift = np.asarray(_AXIS_VECTORS[rule.offset_axis]) * offset
    position = as_point(np.asarray(anchor, dtype=np.float64) + shift)
    rotation = math.radians(line_angle) if rule.rotate_with_line else 0.0
    return position, rotation


# ---------------------------------------------------------------------------
# Текстура
# ---------------------------------------------------------------------------

class LabelTexture:
    """Растр надписи: скруглённая подложка и текст по центру холста.

    Ширина текста оценивается по моноширинному шрифту.
    """

    def __init__(
        self,
        text: str,
        font_size: float = cfg.LABEL_FONT_SIZE,
        padding: float = cfg.LABEL_PADDING,
        corner_radius: float = cfg.LABEL_CORNER_RADIUS,
        text_color: str = cfg.LABEL_TEXT_COLOR,
        background_color: str = cfg.LABEL_BACKGROUND_COLOR,
        background_opacity: float = cfg.LABEL_BACKGROUND_OPACITY,
        width: int = cfg.LABEL_CANVAS_WIDTH,
        height: int = cfg.LABEL_CANVAS_HEIGHT,
    ):
        self.text = text
        self.width = width
        self.height = height

        text_width = len(text) * font_size * cfg.LABEL_GLYPH_ADVANCE
        bg_width = text_width + padding * 2
        bg_height = font_size + padding
        self.background_box = (
            (width - bg_width) / 2,
            (height - bg_height) / 2,
            bg_width,
            bg_height,
        )

        dwg = svgwrite.Drawing(size=(width, height))
        bg_x, bg_y, _, _ = self.background_box
        dwg.add(dwg.rect(
            insert=(bg_x, bg_y),
            size=(bg_width, bg_height),
            rx=corner_radius,
            ry=corner_radius,
            fill=background_color,
            fill_opacity=background_opacity,
        ))
        dwg.add(dwg.text(
            text,
            insert=(width / 2, height / 2),
            font_family=cfg.LABEL_FONT_FAMILY,
            font_size=font_size,
            text_anchor='middle',
            dominant_baseline='middle',
            fill=text_color,
        ))
        self._drawing: Optional[svgwrite.Drawing] = dwg
        self.svg: Optional[str] = dwg.tostring()

    @property
    def released(self) -> bool:
        return self._drawing is None

    def release(self) -> None:
        if self._drawing is None:
            logger.warning("Label texture '%s' released twice", self.text)
            return
        self._drawing = None
        self.svg = None
