"""
AirGesture Gesture Core

Frame-driven gesture classification, pointer smoothing, virtual controls
and stroke/scroll dispatch. No camera or UI dependencies.
"""
from .landmarks import LandmarkSample, LandmarkBuffer, is_pinch, fingertip_to_canvas
from .classifier import GestureClassifier, GestureLabel, Classification
from .smoothing import PointerSmoother
from .controls import ControlZone, VirtualButtonHitTester
from .activation import ActivationArbiter
from .stroke import StrokeRenderer, StrokeSurface, StrokeStyle, StrokeOutcome, Tool, CompositeMode
from .scroll import ScrollActuator, ScrollViewport, ScrollDirection, speed_values, describe_speed
from .timers import TimerScheduler, ManualScheduler
from .engine import GestureEngine, FrameResult, EngineSettings, ActionDispatcher

__all__ = [
    'LandmarkSample',
    'LandmarkBuffer',
    'is_pinch',
    'fingertip_to_canvas',
    'GestureClassifier',
    'GestureLabel',
    'Classification',
    'PointerSmoother',
    'ControlZone',
    'VirtualButtonHitTester',
    'ActivationArbiter',
    'StrokeRenderer',
    'StrokeSurface',
    'StrokeStyle',
    'StrokeOutcome',
    'Tool',
    'CompositeMode',
    'ScrollActuator',
    'ScrollViewport',
    'ScrollDirection',
    'speed_values',
    'describe_speed',
    'TimerScheduler',
    'ManualScheduler',
    'GestureEngine',
    'FrameResult',
    'EngineSettings',
    'ActionDispatcher',
]
