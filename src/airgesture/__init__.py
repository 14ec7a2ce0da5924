"""
AirGesture - hand-gesture drawing and document scrolling from a webcam.
"""
__version__ = "0.1.0"
