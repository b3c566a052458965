"""
JSON-based configuration for scene_measure.

Configuration hierarchy (later overrides earlier):
1. Built-in defaults (config.py)
2. User config (~/.measure.json)
3. Project config (./.measure.json)
4. Explicit path passed by the host application

Example .measure.json:
{
    "options": {
        "arrowhead_size": 0.1,
        "coarse_snap_step": 1.0,
        "fine_snap_step": 0.25
    },
    "style": {
        "dimension_color": "#dc2626"
    },
    "logging": {
        "level": "DEBUG",
        "json_file": "measure.log.json"
    }
}
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from scene_measure import config as cfg

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".measure.json"


@dataclass
class MeasurementOptions:
    """Named geometry and snapping options of the annotation engine."""
    extension_offset: float = cfg.EXTENSION_OFFSET
    extension_overshoot: float = cfg.EXTENSION_OVERSHOOT
    arrowhead_size: float = cfg.ARROWHEAD_SIZE
    arrowhead_angle_degrees: float = cfg.ARROWHEAD_ANGLE
    label_padding: float = cfg.LABEL_PADDING
    label_corner_radius: float = cfg.LABEL_CORNER_RADIUS
    label_font_size: float = cfg.LABEL_FONT_SIZE
    coarse_snap_step: float = cfg.COARSE_SNAP_STEP
    fine_snap_step: float = cfg.FINE_SNAP_STEP
    label_offset: float = cfg.LABEL_OFFSET

    def validate(self) -> None:
        """Reject values that make snapping or arrowheads meaningless.

        Raises:
            ValueError: on a non-positive snap step, arrowhead size or font size
        """
        for name in ('coarse_snap_step', 'fine_snap_step', 'arrowhead_size',
                     'label_font_size'):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"{name} must be positive, got {value!r}")
        if self.extension_offset < 0 or self.extension_overshoot < 0:
            raise ValueError("extension offset/overshoot must not be negative")


@dataclass
class StyleConfig:
    """Colours and line styles of the shared materials."""
    dimension_color: str = cfg.DIMENSION_COLOR
    preview_color: str = cfg.PREVIEW_COLOR
    label_text_color: str = cfg.LABEL_TEXT_COLOR
    label_background_color: str = cfg.LABEL_BACKGROUND_COLOR
    label_background_opacity: float = cfg.LABEL_BACKGROUND_OPACITY
    dimension_line_width: float = cfg.DIMENSION_LINE_WIDTH
    extension_line_width: float = cfg.EXTENSION_LINE_WIDTH
    preview_line_width: float = cfg.PREVIEW_LINE_WIDTH
    preview_dash_size: float = cfg.PREVIEW_DASH_SIZE
    preview_gap_size: float = cfg.PREVIEW_GAP_SIZE


@dataclass
class LoggingConfig:
    """Logging settings applied by the host through setup_logging()."""
    level: str = "INFO"
    json_file: Optional[str] = None
    console: bool = True
    use_colors: bool = True

    @property
    def level_number(self) -> int:
        """Numeric logging level; unknown names fall back to INFO."""
        value = logging.getLevelName(str(self.level).upper())
        return value if isinstance(value, int) else logging.INFO


_SECTIONS = {
    'options': MeasurementOptions,
    'style': StyleConfig,
    'logging': LoggingConfig,
}


@dataclass
class ProjectConfig:
    """Complete engine configuration."""
    options: MeasurementOptions = field(default_factory=MeasurementOptions)
    style: StyleConfig = field(default_factory=StyleConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Union[str, Path]) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())
        logger.info("Configuration saved to %s", path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectConfig':
        """Create configuration from dictionary.

        Unknown sections and keys are ignored.
        """
        config = cls()
        for section in _SECTIONS:
            values = data.get(section)
            if not isinstance(values, dict):
                continue
            target = getattr(config, section)
            for key, value in values.items():
                if hasattr(target, key):
                    setattr(target, key, value)
                else:
                    logger.debug("Ignoring unknown config key %s.%s", section, key)
        return config

    @classmethod
    def from_json(cls, json_str: str) -> 'ProjectConfig':
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'ProjectConfig':
        """Load configuration from a JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.info("Configuration loaded from %s", path)
        return cls.from_dict(data)


def find_config_file(
    explicit_config: Optional[Union[str, Path]] = None,
) -> Optional[Path]:
    """Find configuration file.

    Search order:
    1. Explicit config path (if provided)
    2. .measure.json in current working directory
    3. ~/.measure.json in user's home directory

    Returns:
        Path to config file if found, None otherwise
    """
    if explicit_config:
        explicit = Path(explicit_config)
        if explicit.exists():
            return explicit
        logger.warning("Explicit config not found: %s", explicit)

    cwd_config = Path.cwd() / CONFIG_FILENAME
    if cwd_config.exists():
        return cwd_config

    home_config = Path.home() / CONFIG_FILENAME
    if home_config.exists():
        return home_config

    return None


def load_config(
    explicit_config: Optional[Union[str, Path]] = None,
) -> ProjectConfig:
    """Load configuration with fallback to defaults."""
    config_path = find_config_file(explicit_config)

    if config_path:
        try:
            return ProjectConfig.load(config_path)
        except (json.JSONDecodeError, IOError) as e:
            logger.error("Failed to load config %s: %s", config_path, e)

    return ProjectConfig()


def merge_configs(base: ProjectConfig, override: ProjectConfig) -> ProjectConfig:
    """Merge two configurations; non-default values of override win."""
    merged = ProjectConfig.from_dict(base.to_dict())

    for section, section_cls in _SECTIONS.items():
        defaults = section_cls()
        source = getattr(override, section)
        target = getattr(merged, section)
        for f in fields(section_cls):
            value = getattr(source, f.name)
            if value != getattr(defaults, f.name):
                setattr(target, f.name, value)

    return merged
