"""
AirGesture UI Module

PyQt5 host: paint canvas, scrollable document and the main window.
"""
from .paint_canvas import ImageSurface, PaintCanvas
from .scroll_view import DocumentView, ScrollAreaViewport
from .qt_timer import QtTimerScheduler
from .main_window import MainWindow

__all__ = [
    'ImageSurface',
    'PaintCanvas',
    'DocumentView',
    'ScrollAreaViewport',
    'QtTimerScheduler',
    'MainWindow',
]
