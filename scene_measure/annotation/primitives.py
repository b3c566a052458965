"""
Рендер-примитивы размерной аннотации и их ресурсы.

Типы:
  - Material          — материал (цвет, толщина, штрих); разделяемый или собственный
  - GeometryBuffer    — буфер вершин (n, 3)
  - LinePrimitive     — ломаная (размерная, выносная, предпросмотр)
  - ArrowheadPrimitive — треугольная стрелка с ориентацией
  - LabelPrimitive    — надпись-спрайт с собственной текстурой
  - DimensionGroup    — полный набор примитивов одного размера
  - MaterialLibrary   — разделяемые материалы сессии

Владение ресурсами:
  буферы геометрии, материал и текстура надписи принадлежат одной группе
  и освобождаются DimensionGroup.release_resources(); разделяемые материалы
  принадлежат MaterialLibrary и освобождаются только при dispose() сессии.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from scene_measure.geometry.vector import Point3, as_point

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Ресурсы
# ---------------------------------------------------------------------------

@dataclass
class Material:
    """Материал линии или заливки.

    Attributes:
        name: имя для журналов ('dimension', 'label', ...).
        color: цвет '#rrggbb'.
        line_width: толщина линии (px).
        opacity: непрозрачность 0..1.
        dashed: штриховая линия (предпросмотр).
        dash_size, gap_size: параметры штриха в мировых единицах.
    """
    name: str
    color: str
    line_width: float = 1.0
    opacity: float = 1.0
    dashed: bool = False
    dash_size: float = 0.0
    gap_size: float = 0.0
    disposed: bool = field(default=False, init=False)

    def dispose(self) -> None:
        if self.disposed:
            logger.warning("Material '%s' disposed twice", self.name)
            return
        self.disposed = True


class GeometryBuffer:
    """Неизменяемый буфер вершин формы (n, 3)."""

    __slots__ = ('positions', 'disposed')

    def __init__(self, points: Sequence[Any]):
        positions = np.array([as_point(p) for p in points], dtype=np.float64).reshape(-1, 3)
        positions.flags.writeable = False
        self.positions: NDArray[np.float64] = positions
        self.disposed = False

    def dispose(self) -> None:
        if self.disposed:
            logger.warning("Geometry buffer disposed twice")
            return
        self.disposed = True

    def __len__(self) -> int:
        return len(self.positions)


# ---------------------------------------------------------------------------
# Примитивы
# ---------------------------------------------------------------------------

class LinePrimitive:
    """Ломаная линия сцены.

    line_distances — накопленная длина вдоль линии в каждой вершине,
    нужна штриховому материалу.
    """

    def __init__(self, points: Sequence[Any], material: Material, name: str = "line"):
        self.name = name
        self.material = material
        self.geometry = GeometryBuffer(points)
        self.line_distances = self._compute_line_distances()

    def set_points(self, points: Sequence[Any]) -> None:
        """Заменить вершины (предпросмотр при движении указателя)."""
        old = self.geometry
        self.geometry = GeometryBuffer(points)
        old.dispose()
        self.line_distances = self._compute_line_distances()

    def _compute_line_distances(self) -> NDArray[np.float64]:
        pts = self.geometry.positions
        if len(pts) < 2:
            return np.zeros(len(pts))
        seg = np.linalg.norm(np.diff(pts, axis=0), axis=1)
        return np.concatenate([[0.0], np.cumsum(seg)])

    @property
    def start(self) -> Point3:
        return as_point(self.geometry.positions[0])

    @property
    def end(self) -> Point3:
        return as_point(self.geometry.positions[-1])

    def release(self) -> None:
        """Освободить собственный буфер (материал — разделяемый)."""
        self.geometry.dispose()


class ArrowheadPrimitive:
    """Треугольная стрелка.

    Attributes:
        position: вершина стрелки (точка измерения).
        rotation: матрица 3x3 локальная → мировая.
        geometry: локальные вершины треугольника.
        world_vertices: вершины в мировых координатах.
    """

    def __init__(
        self,
        position: Point3,
        rotation: NDArray[np.float64],
        local_vertices: Sequence[Any],
        material: Material,
    ):
        self.position = as_point(position)
        rotation = np.array(rotation, dtype=np.float64)
        rotation.flags.writeable = False
        self.rotation = rotation
        self.material = material
        self.geometry = GeometryBuffer(local_vertices)
        world = self.geometry.positions @ rotation.T + self.position
        world.flags.writeable = False
        self.world_vertices: NDArray[np.float64] = world

    def release(self) -> None:
        self.geometry.dispose()


class LabelPrimitive:
    """Размерная надпись: спрайт с собственными материалом и текстурой."""

    def __init__(
        self,
        text: str,
        position: Point3,
        rotation_z: float,
        scale: Tuple[float, float, float],
        material: Material,
        texture: Any,
    ):
        self.text = text
        self.position = as_point(position)
        self.rotation_z = rotation_z
        self.scale = tuple(scale)
        self.material = material
        self.texture = texture

    def release(self) -> None:
        self.texture.release()
        self.material.dispose()


# ---------------------------------------------------------------------------
# Группа размера
# ---------------------------------------------------------------------------

class DimensionGroup:
    """Размер как единое целое: добавляется, удаляется и освобождается вместе.

    Части перечислены явно, release_resources() освобождает каждую без
    обхода дерева и проверки типов.
    """

    def __init__(
        self,
        main_line: LinePrimitive,
        extension_lines: Tuple[LinePrimitive, LinePrimitive],
        arrowheads: Tuple[ArrowheadPrimitive, ArrowheadPrimitive],
        label: LabelPrimitive,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        self.main_line = main_line
        self.extension_lines = tuple(extension_lines)
        self.arrowheads = tuple(arrowheads)
        self.label = label
        self.metadata: Dict[str, Any] = dict(metadata or {})
        self.released = False

    @property
    def parts(self) -> Tuple[Any, ...]:
        """Все примитивы в порядке построения."""
        return (self.main_line, *self.extension_lines, *self.arrowheads, self.label)

    def add_to_scene(self, scene: Any) -> None:
        scene.add(self)

    def remove_from_scene(self, scene: Any) -> None:
        scene.remove(self)

    def release_resources(self) -> None:
        """Освободить буферы, материал и текстуру надписи (ровно один раз)."""
        if self.released:
            logger.warning("Dimension group released twice")
            return
        self.main_line.release()
        for line in self.extension_lines:
            line.release()
        for arrow in self.arrowheads:
            arrow.release()
        self.label.release()
        self.released = True


# ---------------------------------------------------------------------------
# Разделяемые материалы
# ---------------------------------------------------------------------------

class MaterialLibrary:
    """Материалы, общие для всех размеров одной сессии."""

    def __init__(self, dimension: Material, extension: Material,
                 preview: Material, arrowhead: Material):
        self.dimension = dimension
        self.extension = extension
        self.preview = preview
        self.arrowhead = arrowhead
        self.disposed = False

    @classmethod
    def from_style(cls, style) -> 'MaterialLibrary':
        """Создать материалы по StyleConfig."""
        return cls(
            dimension=Material('dimension', style.dimension_color,
                               line_width=style.dimension_line_width),
            extension=Material('extension', style.dimension_color,
                               line_width=style.extension_line_width),
            preview=Material('preview', style.preview_color,
                             line_width=style.preview_line_width,
                             dashed=True,
                             dash_size=style.preview_dash_size,
                             gap_size=style.preview_gap_size),
            arrowhead=Material('arrowhead', style.dimension_color),
        )

    def all(self) -> Tuple[Material, ...]:
        return (self.dimension, self.extension, self.preview, self.arrowhead)

    def dispose(self) -> None:
        if self.disposed:
            return
        for material in self.all():
            material.dispose()
        self.disposed = True
