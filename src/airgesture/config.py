"""
Config loader for AirGesture.
Loads YAML configuration with dataclass validation.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
import yaml


MODES = ("draw", "scroll")
CONTROL_MODES = ("gesture", "manual")

DEFAULT_PALETTE = [
    "#ff5c8d", "#ffb347", "#ffe066", "#4ade80",
    "#60a5fa", "#c084fc", "#111827",
]


class ConfigError(ValueError):
    """Raised when a configuration value is out of range."""


@dataclass
class CameraConfig:
    device_id: int = 0
    width: int = 1280
    height: int = 720
    fps: int = 30


@dataclass
class MediaPipeConfig:
    max_num_hands: int = 1
    min_detection_confidence: float = 0.7
    min_tracking_confidence: float = 0.7
    model_path: Optional[str] = None


@dataclass
class ClassifierConfig:
    debounce_frames: int = 3           # Consecutive frames to flip in or out of a gesture

    # Draw mode: fist with thumb tucked
    finger_closed_tolerance: float = 0.02
    min_closed_fingers: int = 2
    thumb_below_margin: float = 0.03
    thumb_palm_radius: float = 0.20    # Max thumb tip to index MCP distance
    thumb_wrist_ratio: float = 0.9     # Thumb must be this much closer to the wrist than index tip

    # Scroll mode
    finger_extended_margin: float = 0.05
    min_extended_fingers: int = 3
    min_fist_fingers: int = 3
    swipe_threshold: float = 0.08      # Wrist x delta between frames


@dataclass
class SmoothingConfig:
    engaged_alpha: float = 0.65        # Lower = steadier strokes
    idle_alpha: float = 0.95           # Higher = pointer follows finger closely


@dataclass
class ControlsConfig:
    button_size: int = 80
    margin: int = 20
    button_gap: int = 10
    color_count: int = 4
    color_size: int = 54
    color_gap: int = 12
    color_top_gap: int = 20            # Space between eraser and first color
    palette: List[str] = field(default_factory=lambda: list(DEFAULT_PALETTE))


@dataclass
class ActivationConfig:
    pinch_threshold: float = 0.05
    cooldown_ms: float = 500.0
    dwell_ms: float = 700.0


@dataclass
class StrokeConfig:
    min_move: float = 1.0              # Below this (px) the point is absorbed
    max_move: float = 200.0            # At or above this (px) the stroke re-anchors
    brush_width: float = 5.0
    eraser_width: float = 40.0
    color: str = "#ff0000"


@dataclass
class ScrollConfig:
    speed: int = 7
    nudge_amount: int = 100


@dataclass
class AppConfig:
    mode: str = "draw"
    control_mode: str = "gesture"
    show_landmarks: bool = True
    document: Optional[str] = None


@dataclass
class Config:
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
    controls: ControlsConfig = field(default_factory=ControlsConfig)
    activation: ActivationConfig = field(default_factory=ActivationConfig)
    stroke: StrokeConfig = field(default_factory=StrokeConfig)
    scroll: ScrollConfig = field(default_factory=ScrollConfig)
    app: AppConfig = field(default_factory=AppConfig)


def _dict_to_dataclass(cls, data: dict):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    field_names = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


def validate_config(config: Config) -> Config:
    """
    Check ranges that would otherwise break the engine at runtime.

    Raises:
        ConfigError: on the first invalid value found.
    """
    if config.app.mode not in MODES:
        raise ConfigError(f"app.mode must be one of {MODES}, got {config.app.mode!r}")
    if config.app.control_mode not in CONTROL_MODES:
        raise ConfigError(
            f"app.control_mode must be one of {CONTROL_MODES}, got {config.app.control_mode!r}"
        )
    if not 1 <= config.scroll.speed <= 10:
        raise ConfigError(f"scroll.speed must be 1-10, got {config.scroll.speed}")

    for name in ("engaged_alpha", "idle_alpha"):
        alpha = getattr(config.smoothing, name)
        if not 0.0 < alpha <= 1.0:
            raise ConfigError(f"smoothing.{name} must be in (0, 1], got {alpha}")

    controls = config.controls
    for name in ("button_size", "margin", "button_gap", "color_size", "color_gap", "color_top_gap"):
        if getattr(controls, name) <= 0:
            raise ConfigError(f"controls.{name} must be positive")
    if controls.color_count < 0:
        raise ConfigError("controls.color_count must not be negative")

    if config.classifier.debounce_frames < 1:
        raise ConfigError("classifier.debounce_frames must be at least 1")
    if config.stroke.min_move >= config.stroke.max_move:
        raise ConfigError("stroke.min_move must be smaller than stroke.max_move")
    return config


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default config.yaml
                    in project root.

    Returns:
        Config dataclass with all settings.

    Raises:
        ConfigError: if a value is out of range.
    """
    if config_path is None:
        # Default to config.yaml in project root
        config_path = Path(__file__).parent.parent.parent / "config.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        # Return defaults if no config file
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    config = Config(
        camera=_dict_to_dataclass(CameraConfig, data.get('camera')),
        mediapipe=_dict_to_dataclass(MediaPipeConfig, data.get('mediapipe')),
        classifier=_dict_to_dataclass(ClassifierConfig, data.get('classifier')),
        smoothing=_dict_to_dataclass(SmoothingConfig, data.get('smoothing')),
        controls=_dict_to_dataclass(ControlsConfig, data.get('controls')),
        activation=_dict_to_dataclass(ActivationConfig, data.get('activation')),
        stroke=_dict_to_dataclass(StrokeConfig, data.get('stroke')),
        scroll=_dict_to_dataclass(ScrollConfig, data.get('scroll')),
        app=_dict_to_dataclass(AppConfig, data.get('app')),
    )
    return validate_config(config)
