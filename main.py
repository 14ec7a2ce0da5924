"""
AirGesture - Hand-Gesture Drawing and Document Scrolling

Entry point for the application.
"""
import argparse
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="AirGesture - draw and scroll with hand gestures",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--mode",
        choices=["draw", "scroll"],
        default=None,
        help="Interaction mode (overrides config)",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--speed",
        type=int,
        choices=range(1, 11),
        metavar="1-10",
        default=None,
        help="Scroll speed (overrides config)",
    )

    parser.add_argument(
        "--document",
        type=Path,
        default=None,
        help="Image to show in scroll mode",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="OpenCV debug window instead of the Qt interface",
    )

    return parser.parse_args()


def run_debug(config):
    """
    Run the engine against an OpenCV window.
    Shows camera feed, landmarks, controls and the stroke raster.
    """
    import time
    import cv2
    from airgesture.gestures import GestureEngine, ManualScheduler, ScrollViewport
    from airgesture.webcam import HandTracker, CanvasImage, composite, draw_controls, draw_cursor

    class DebugViewport(ScrollViewport):
        """No document in debug mode: accumulate the offset and print it."""

        def __init__(self):
            self.offset = [0, 0]

        def scroll_by(self, dx, dy):
            self.offset[0] += dx
            self.offset[1] += dy

    tracker = HandTracker(config)
    canvas = CanvasImage(config.camera.width, config.camera.height)
    viewport = DebugViewport()
    scheduler = ManualScheduler(time.perf_counter() * 1000.0)
    engine = GestureEngine(config, surface=canvas, viewport=viewport, scheduler=scheduler)

    print(f"Starting debug mode ({engine.mode})...")
    print("Press 'q' to quit, 'c' to clear, 'm' to switch mode")
    print("-" * 40)

    if not tracker.start():
        print("ERROR: Could not start hand tracking (see log)")
        return 1

    last_direction = None
    try:
        while True:
            sample = tracker.get_landmarks()
            frame = tracker.get_frame_with_landmarks(
                sample if config.app.show_landmarks else None
            )
            if frame is None:
                if cv2.waitKey(1) & 0xFF == ord('q'):
                    break
                continue

            h, w = frame.shape[:2]
            canvas.resize(w, h)
            now_ms = time.perf_counter() * 1000.0
            result = engine.process(sample, (w, h), now_ms)
            scheduler.advance_to(now_ms)

            frame = composite(frame, canvas.image)
            draw_controls(frame, result.zones, result.hovered, result.dwell_progress,
                          active=engine.settings.tool.value)
            draw_cursor(frame, result.pointer, result.engaged)

            cv2.putText(
                frame, f"Gesture: {result.label.value}", (10, 30),
                cv2.FONT_HERSHEY_SIMPLEX, 1, (0, 255, 0), 2
            )
            info_lines = [
                f"Raw: {result.raw_label.value}",
                f"Mode: {engine.mode}  Tool: {engine.settings.tool.value}",
                f"Pinch: {result.pinch}",
            ]
            if result.hovered:
                info_lines.append(f"Over: {result.hovered} ({result.dwell_progress:.0%})")
            for i, line in enumerate(info_lines):
                cv2.putText(
                    frame, line, (10, 60 + i * 25),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1
                )

            if result.fired:
                print(f"[{tracker.frame_count:5d}] Control: {result.fired}")
            if result.scroll_direction != last_direction:
                last_direction = result.scroll_direction
                name = last_direction.value if last_direction else "stopped"
                print(f"[{tracker.frame_count:5d}] Scroll: {name} offset={viewport.offset}")

            cv2.imshow("AirGesture Debug", frame)

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            if key == ord('c'):
                engine.clear_canvas()
            elif key == ord('m'):
                engine.set_mode("scroll" if engine.mode == "draw" else "draw")
                print(f"Mode: {engine.mode}")

    finally:
        engine.shutdown()
        tracker.stop()
        cv2.destroyAllWindows()

    return 0


def run_app(config, document=None):
    """Run AirGesture with the Qt interface (capture in a worker thread)."""
    import signal
    import atexit
    from PyQt5.QtWidgets import QApplication
    from PyQt5.QtCore import QThread, Qt
    from airgesture.ui import MainWindow
    from airgesture.webcam import WebcamWorker

    app = QApplication(sys.argv)

    window = MainWindow(config, document=document)
    window.show()

    # Setup background worker and thread
    thread = QThread()
    worker = WebcamWorker(config)
    worker.moveToThread(thread)

    def cleanup():
        """Ensure camera is released and scroll timers stopped on exit."""
        print("\nCleaning up camera resources...")
        window.engine.shutdown()
        worker.stop_process()
        thread.quit()
        thread.wait(2000)
        print("Cleanup complete.")

    atexit.register(cleanup)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        print(f"\nReceived signal {signum}, shutting down...")
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    def handle_error(message):
        print(f"WORKER ERROR: {message}")
        window.handle_error(message)
        worker.stop_process()

    # Queued connections keep every engine call on the GUI thread
    thread.started.connect(worker.start_process)
    worker.sample_ready.connect(window.handle_sample, Qt.QueuedConnection)
    worker.frame_ready.connect(window.handle_frame, Qt.QueuedConnection)
    worker.error.connect(handle_error, Qt.QueuedConnection)
    worker.finished.connect(thread.quit)

    thread.start()

    try:
        result = app.exec_()
    finally:
        cleanup()
        atexit.unregister(cleanup)  # Avoid double cleanup

    return result


def main():
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from airgesture.config import ConfigError, load_config
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"ERROR: Invalid config: {e}")
        return 2

    # Apply CLI overrides
    if args.mode:
        config.app.mode = args.mode
    if args.speed is not None:
        config.scroll.speed = args.speed
    document = args.document or (Path(config.app.document) if config.app.document else None)

    print("AirGesture starting...")
    print(f"  Mode: {config.app.mode}")
    print(f"  Control: {config.app.control_mode}")
    print(f"  Scroll speed: {config.scroll.speed}")
    print(f"  Debug: {args.debug}")
    print()

    if args.debug:
        return run_debug(config)
    return run_app(config, document)


if __name__ == "__main__":
    sys.exit(main())
