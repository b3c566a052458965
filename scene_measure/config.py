"""
Константы размерных аннотаций по умолчанию.

Все значения в мировых единицах сцены (метры), кроме параметров надписи,
которые заданы в пикселях холста текстуры.
Переопределяются через MeasurementOptions / .measure.json.
"""

# ---------------------------------------------------------------------------
# Выносные линии
# ---------------------------------------------------------------------------

EXTENSION_OFFSET = 0.002      # зазор от точки измерения
EXTENSION_OVERSHOOT = 0.003   # выход за размерную линию

# ---------------------------------------------------------------------------
# Стрелки
# ---------------------------------------------------------------------------

ARROWHEAD_SIZE = 0.08         # длина стрелки
ARROWHEAD_ANGLE = 45.0        # половина угла при вершине (градусы)

# ---------------------------------------------------------------------------
# Размерная надпись
# ---------------------------------------------------------------------------

LABEL_PADDING = 4             # px
LABEL_CORNER_RADIUS = 2       # px
LABEL_FONT_SIZE = 16          # px
LABEL_FONT_FAMILY = "monospace"
LABEL_CANVAS_WIDTH = 256
LABEL_CANVAS_HEIGHT = 64
LABEL_GLYPH_ADVANCE = 0.6     # ширина моноширинного символа в долях кегля
LABEL_OFFSET = 0.15           # смещение надписи от размерной линии
LABEL_SCALE = (2.0, 0.5, 1.0)
LABEL_DECIMALS = 2
DISTANCE_UNIT = "m"

# ---------------------------------------------------------------------------
# Привязка к шагу
# ---------------------------------------------------------------------------

COARSE_SNAP_STEP = 0.5        # Shift
FINE_SNAP_STEP = 0.1          # Ctrl

# ---------------------------------------------------------------------------
# Стили
# ---------------------------------------------------------------------------

DIMENSION_COLOR = "#2563eb"
PREVIEW_COLOR = "#94a3b8"
LABEL_TEXT_COLOR = "#1e40af"
LABEL_BACKGROUND_COLOR = "#ffffff"
LABEL_BACKGROUND_OPACITY = 0.9

DIMENSION_LINE_WIDTH = 2.0
EXTENSION_LINE_WIDTH = 1.0
PREVIEW_LINE_WIDTH = 1.0
PREVIEW_DASH_SIZE = 0.2
PREVIEW_GAP_SIZE = 0.1
