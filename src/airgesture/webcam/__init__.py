"""
AirGesture Webcam Module

Hand landmark capture with MediaPipe, the Qt capture worker and the
OpenCV preview used by debug mode.
"""
from .hand_tracker import HandTracker, draw_landmarks
from .preview import CanvasImage, composite, draw_controls, draw_cursor
from .worker import WebcamWorker

__all__ = [
    'HandTracker',
    'draw_landmarks',
    'CanvasImage',
    'composite',
    'draw_controls',
    'draw_cursor',
    'WebcamWorker',
]
