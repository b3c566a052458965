"""
Векторная геометрия размерных аннотаций.

Все функции чистые: принимают точки/векторы (любые 3-последовательности),
возвращают новые массивы numpy, входные данные не изменяются.

Содержит:
- as_point              — неизменяемая копия точки (Point3)
- distance, midpoint    — расстояние и середина отрезка
- angle_degrees         — угол отрезка в рабочей плоскости XY
- snap_to_increment     — привязка длины отрезка к шагу
- perpendicular         — единичный перпендикуляр в плоскости XY
- rotation_z, look_at_rotation — матрицы ориентации стрелок
"""

import math
from typing import Sequence, Union

import numpy as np
from numpy.linalg import norm
from numpy.typing import NDArray

Point3 = NDArray[np.float64]
PointLike = Union[Point3, Sequence[float]]

_UP = (0.0, 1.0, 0.0)


def as_point(value: PointLike) -> Point3:
    """Создать неизменяемую копию точки.

    Копия никогда не разделяет память с аргументом, поэтому изменение
    исходного вектора вызывающей стороной не влияет на сохранённые точки.

    Raises:
        ValueError: если у значения не 3 компоненты.
    """
    point = np.array(value, dtype=np.float64, copy=True).reshape(-1)
    if point.shape != (3,):
        raise ValueError(f"Point3 must have 3 components, got shape {point.shape}")
    point.flags.writeable = False
    return point


def normalize(vector: PointLike) -> Point3:
    """Единичный вектор; нулевой вектор остаётся нулевым."""
    v = np.asarray(vector, dtype=np.float64)
    length = norm(v)
    if length == 0:
        return as_point(np.zeros(3))
    return as_point(v / length)


def distance(a: PointLike, b: PointLike) -> float:
    """Евклидово расстояние |b - a|."""
    return float(norm(np.asarray(b, dtype=np.float64) - np.asarray(a, dtype=np.float64)))


def midpoint(a: PointLike, b: PointLike) -> Point3:
    """Середина отрезка ab."""
    return as_point((np.asarray(a, dtype=np.float64) + np.asarray(b, dtype=np.float64)) * 0.5)


def angle_degrees(a: PointLike, b: PointLike) -> float:
    """Угол направления (b - a) в плоскости XY, градусы в (-180, 180]."""
    dx = float(b[0]) - float(a[0])
    dy = float(b[1]) - float(a[1])
    return math.degrees(math.atan2(dy, dx))


def round_half_up(value: float) -> float:
    """Округление к ближайшему целому, половины — вверх (2.5 → 3).

    Встроенный round() округляет половины к чётному, что даёт
    несимметричную привязку на границах шага.
    """
    return float(np.floor(value + 0.5))


def snap_to_increment(start: PointLike, end: PointLike, increment: float) -> Point3:
    """Привязать длину отрезка к ближайшему кратному шага.

    Направление (end - start) сохраняется. Если округлённая длина равна нулю,
    возвращается исходный end: отрезок нулевой длины не создаётся молча.

    Args:
        start: начальная точка (неподвижна).
        end: конечная точка до привязки.
        increment: шаг привязки (> 0).

    Returns:
        Новая конечная точка.
    """
    d = distance(start, end)
    snapped = round_half_up(d / increment) * increment

    if snapped == 0:
        return as_point(end)

    s = np.asarray(start, dtype=np.float64)
    direction = normalize(np.asarray(end, dtype=np.float64) - s)
    return as_point(s + direction * snapped)


def perpendicular(direction: PointLike) -> Point3:
    """Единичный вектор в плоскости XY, повёрнутый на 90° от direction.

    Для направления вдоль оси Z проекция нулевая — возвращается нулевой вектор.
    """
    return normalize((-float(direction[1]), float(direction[0]), 0.0))


def rotation_z(angle_deg: float) -> NDArray[np.float64]:
    """Матрица поворота 3x3 вокруг оси Z."""
    rad = math.radians(angle_deg)
    c, s = math.cos(rad), math.sin(rad)
    return np.array([
        [c, -s, 0.0],
        [s, c, 0.0],
        [0.0, 0.0, 1.0],
    ])


def look_at_rotation(direction: PointLike, up: PointLike = _UP) -> NDArray[np.float64]:
    """Ориентация объекта, у которой локальная ось +Z смотрит вдоль direction.

    Семантика look-at графа сцены для не-камер: столбцы матрицы — базис
    (x, y, z), z = direction, x = up × z, y = z × x. Если direction
    параллелен up, z слегка возмущается, чтобы базис оставался определён.
    """
    up_v = np.asarray(up, dtype=np.float64)
    z = np.asarray(direction, dtype=np.float64).copy()
    if norm(z) == 0:
        z = np.array([0.0, 0.0, 1.0])
    z = z / norm(z)

    x = np.cross(up_v, z)
    if norm(x) == 0:
        if abs(up_v[2]) == 1:
            z[0] += 0.0001
        else:
            z[2] += 0.0001
        z = z / norm(z)
        x = np.cross(up_v, z)
    x = x / norm(x)
    y = np.cross(z, x)

    return np.column_stack([x, y, z])
