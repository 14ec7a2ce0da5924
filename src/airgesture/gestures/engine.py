"""
Per-frame gesture engine.

One landmark sample in, one FrameResult out:

    sample -> classifier -> smoother -> hit tester -> arbiter -> dispatcher

Draw mode and scroll mode are two deployments of the same engine,
selected by a single mode flag.
"""
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple
import logging
import time

from ..config import Config
from .activation import ActivationArbiter
from .classifier import Classification, GestureClassifier, GestureLabel
from .controls import BRUSH, ERASER, ControlZone, VirtualButtonHitTester, parse_color_index
from .landmarks import LandmarkBuffer, LandmarkSample, Point, fingertip_to_canvas, is_pinch
from .scroll import ScrollActuator, ScrollDirection, ScrollViewport, clamp_speed
from .smoothing import PointerSmoother
from .stroke import StrokeOutcome, StrokeRenderer, StrokeStyle, StrokeSurface, Tool
from .timers import TimerScheduler

logger = logging.getLogger(__name__)

DRAW = "draw"
SCROLL = "scroll"


@dataclass
class EngineSettings:
    """Host-adjustable settings, read fresh every frame."""
    mode: str = DRAW
    tool: Tool = Tool.BRUSH
    brush_width: float = 5.0
    eraser_width: float = 40.0
    color: str = "#ff0000"
    scroll_speed: int = 7
    control_mode: str = "gesture"
    manual_drawing: bool = False

    @classmethod
    def from_config(cls, config: Config) -> "EngineSettings":
        return cls(
            mode=config.app.mode,
            brush_width=config.stroke.brush_width,
            eraser_width=config.stroke.eraser_width,
            color=config.stroke.color,
            scroll_speed=clamp_speed(config.scroll.speed),
            control_mode=config.app.control_mode,
        )

    @property
    def style(self) -> StrokeStyle:
        return StrokeStyle.for_tool(self.tool, self.brush_width, self.eraser_width, self.color)


@dataclass(frozen=True)
class FrameResult:
    """Everything a host needs to render one frame."""
    raw_label: GestureLabel = GestureLabel.NONE
    label: GestureLabel = GestureLabel.NONE
    engaged: bool = False
    hand_present: bool = False
    pointer: Optional[Point] = None
    hovered: Optional[str] = None
    dwell_progress: float = 0.0
    pinch: bool = False
    fired: Optional[str] = None
    stroke: Optional[StrokeOutcome] = None
    scroll_direction: Optional[ScrollDirection] = None
    zones: Tuple[ControlZone, ...] = field(default_factory=tuple)


class ActionDispatcher:
    """
    Routes the effective gesture and pointer to the stroke renderer (draw
    mode) or the scroll actuator (scroll mode). Only one is ever set.
    """

    def __init__(self, renderer: Optional[StrokeRenderer] = None,
                 actuator: Optional[ScrollActuator] = None):
        if renderer is not None and actuator is not None:
            raise ValueError("A dispatcher drives either strokes or scrolling, not both")
        self.renderer = renderer
        self.actuator = actuator

    def dispatch(
        self,
        label: GestureLabel,
        engaged: bool,
        pointer: Optional[Point],
        style: StrokeStyle,
        bounds: Optional[Tuple[float, float]],
    ) -> Tuple[Optional[StrokeOutcome], Optional[ScrollDirection]]:
        if self.actuator is not None:
            direction = self.actuator.apply(label if engaged else GestureLabel.NONE)
            return None, direction

        if self.renderer is None:
            return None, None
        if not engaged or pointer is None or bounds is None:
            self.renderer.reset()
            return None, None
        return self.renderer.add_point(pointer, style, bounds), None

    def suppress(self) -> None:
        """Pointer is over a control: end the session outright."""
        self.reset()

    def reset(self) -> None:
        if self.renderer is not None:
            self.renderer.reset()
        if self.actuator is not None:
            self.actuator.stop()


class GestureEngine:
    """
    Frame-driven controller shared by draw and scroll deployments.

    Args:
        config: Loaded configuration
        surface: Raster for draw mode
        viewport: Scroll target for scroll mode
        scheduler: Timer source for scroll mode
        on_control: Called with the identity of every fired control
    """

    def __init__(
        self,
        config: Config,
        surface: Optional[StrokeSurface] = None,
        viewport: Optional[ScrollViewport] = None,
        scheduler: Optional[TimerScheduler] = None,
        on_control: Optional[Callable[[str], None]] = None,
    ):
        self._config = config
        self._surface = surface
        self._viewport = viewport
        self._scheduler = scheduler
        self._on_control = on_control
        self.settings = EngineSettings.from_config(config)

        self._buffer = LandmarkBuffer()
        self._smoother = PointerSmoother(
            config.smoothing.engaged_alpha, config.smoothing.idle_alpha
        )
        self._hit_tester = VirtualButtonHitTester(config.controls)
        self._arbiter = ActivationArbiter(
            config.activation.cooldown_ms, config.activation.dwell_ms
        )
        self._build_mode(self.settings.mode)

    # ------------------------------------------------------------------
    # Mode wiring
    # ------------------------------------------------------------------
    def _build_mode(self, mode: str) -> None:
        self._classifier = GestureClassifier(self._config.classifier, mode)
        self._renderer: Optional[StrokeRenderer] = None
        self._actuator: Optional[ScrollActuator] = None

        if mode == SCROLL:
            if self._viewport is None or self._scheduler is None:
                raise ValueError("Scroll mode needs a viewport and a scheduler")
            self._actuator = ScrollActuator(
                self._viewport, self._scheduler,
                speed=self.settings.scroll_speed,
                nudge_amount=self._config.scroll.nudge_amount,
            )
            self._hit_tester.enabled = False
        else:
            if self._surface is None:
                raise ValueError("Draw mode needs a stroke surface")
            self._renderer = StrokeRenderer(
                self._surface, self._config.stroke.min_move, self._config.stroke.max_move
            )
            self._hit_tester.enabled = True

        self._dispatcher = ActionDispatcher(self._renderer, self._actuator)

    @property
    def mode(self) -> str:
        return self.settings.mode

    def set_mode(self, mode: str) -> None:
        if mode not in (DRAW, SCROLL):
            raise ValueError(f"Unknown mode {mode!r}")
        if mode == self.settings.mode:
            return
        self.shutdown()
        self.settings.mode = mode
        self._build_mode(mode)
        logger.info("Switched to %s mode", mode)

    @property
    def classifier(self) -> GestureClassifier:
        return self._classifier

    @property
    def smoother(self) -> PointerSmoother:
        return self._smoother

    @property
    def arbiter(self) -> ActivationArbiter:
        return self._arbiter

    @property
    def renderer(self) -> Optional[StrokeRenderer]:
        return self._renderer

    @property
    def actuator(self) -> Optional[ScrollActuator]:
        return self._actuator

    @property
    def palette(self):
        return self._hit_tester.palette

    # ------------------------------------------------------------------
    # Host settings
    # ------------------------------------------------------------------
    def set_tool(self, tool: Tool) -> None:
        if tool != self.settings.tool:
            self.settings.tool = tool
            self._end_stroke()

    def set_color(self, color: str) -> None:
        self.settings.color = color

    def set_brush_width(self, width: float) -> None:
        self.settings.brush_width = max(1.0, float(width))

    def set_eraser_width(self, width: float) -> None:
        self.settings.eraser_width = max(1.0, float(width))

    def set_scroll_speed(self, speed: int) -> int:
        self.settings.scroll_speed = clamp_speed(speed)
        if self._actuator is not None:
            self._actuator.set_speed(self.settings.scroll_speed)
        return self.settings.scroll_speed

    def set_manual_drawing(self, active: bool) -> None:
        active = bool(active)
        if active != self.settings.manual_drawing:
            self.settings.manual_drawing = active
            self._end_stroke()

    def set_control_mode(self, control_mode: str) -> None:
        if control_mode not in ("gesture", "manual"):
            raise ValueError(f"Unknown control mode {control_mode!r}")
        if control_mode != self.settings.control_mode:
            self.settings.control_mode = control_mode
            self.settings.manual_drawing = False
            self._end_stroke()

    def nudge(self, direction: ScrollDirection) -> None:
        if self._actuator is not None:
            self._actuator.nudge(direction)

    def clear_canvas(self) -> None:
        if self._renderer is not None:
            self._renderer.clear()
        self._smoother.reset()
        self._classifier.reset()

    def apply_control(self, identity: str) -> None:
        """Run the action behind a fired control zone."""
        if identity == BRUSH:
            self.set_tool(Tool.BRUSH)
        elif identity == ERASER:
            self.set_tool(Tool.ERASER)
        else:
            index = parse_color_index(identity)
            palette = self._hit_tester.palette
            if index is None or not 0 <= index < len(palette):
                logger.warning("Ignoring unknown control %r", identity)
                return
            self.set_color(palette[index])
            self.set_tool(Tool.BRUSH)
        logger.info("Control activated: %s", identity)
        if self._on_control is not None:
            self._on_control(identity)

    # ------------------------------------------------------------------
    # Frame processing
    # ------------------------------------------------------------------
    def _end_stroke(self) -> None:
        if self._renderer is not None:
            self._renderer.reset()
        self._smoother.reset()

    def _teardown_session(self) -> None:
        self._dispatcher.reset()
        self._smoother.reset()
        self._arbiter.clear_hover()

    @property
    def _manual_control(self) -> bool:
        return self.settings.mode == DRAW and self.settings.control_mode == "manual"

    def _engaged(self, classification: Classification) -> bool:
        if self._manual_control:
            return self.settings.manual_drawing
        return classification.engaged

    def process(
        self,
        sample: Optional[LandmarkSample],
        canvas_size: Tuple[float, float],
        now_ms: Optional[float] = None,
    ) -> FrameResult:
        """
        Run one frame.

        Args:
            sample: First detected hand, or None when no hand is tracked
            canvas_size: (width, height) of the drawing canvas in pixels
            now_ms: Monotonic time in milliseconds, defaults to perf_counter
        """
        if now_ms is None:
            now_ms = time.perf_counter() * 1000.0
        width, height = canvas_size
        self._buffer.push(sample)

        if sample is None:
            if self._buffer.tracking_lost:
                logger.debug("Hand lost, session torn down")
            self._classifier.update(None)
            self._teardown_session()
            return FrameResult(zones=self._hit_tester.build_layout(width, height))

        classification = self._classifier.update(sample)
        engaged = self._engaged(classification)
        if classification.changed and not self._manual_control:
            self._end_stroke()

        if width <= 0 or height <= 0:
            # Nothing to point at or draw on; scrolling does not need a canvas
            direction = None
            if self._actuator is not None:
                _, direction = self._dispatcher.dispatch(
                    classification.effective, engaged, None, self.settings.style, None
                )
            return FrameResult(
                raw_label=classification.raw,
                label=classification.effective,
                engaged=engaged,
                hand_present=True,
                scroll_direction=direction,
            )

        pointer = None
        raw = fingertip_to_canvas(sample, width, height)
        if raw is not None:
            pointer = self._smoother.update(raw, engaged)

        hit = self._hit_tester.hit_test(pointer, width, height)
        pinch = is_pinch(sample, self._config.activation.pinch_threshold)
        fired = self._arbiter.update(hit.identity, pinch, now_ms)
        dwell = self._arbiter.dwell_progress(now_ms)
        if fired is not None:
            self.apply_control(fired)

        if hit.zone is not None:
            self._dispatcher.suppress()
            if engaged:
                self._smoother.reset()
            return FrameResult(
                raw_label=classification.raw,
                label=classification.effective,
                engaged=False,
                hand_present=True,
                pointer=pointer,
                hovered=hit.identity,
                dwell_progress=dwell,
                pinch=pinch,
                fired=fired,
                zones=hit.layout,
            )

        stroke, direction = self._dispatcher.dispatch(
            classification.effective, engaged, pointer, self.settings.style, (width, height)
        )
        return FrameResult(
            raw_label=classification.raw,
            label=classification.effective,
            engaged=engaged,
            hand_present=True,
            pointer=pointer,
            pinch=pinch,
            fired=fired,
            stroke=stroke,
            scroll_direction=direction,
            zones=hit.layout,
        )

    def shutdown(self) -> None:
        """Stop any running scroll timer and drop all per-session state."""
        self._teardown_session()
        self._classifier.reset()
        self._arbiter.reset()
        self._buffer.clear()
