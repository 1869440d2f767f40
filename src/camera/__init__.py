"""
Camera package.

Canonical imports:
- `from camera.camera import create_camera`
- `from camera.capture import FrameGrabber`
- `from camera.backends.opencv import OpenCVCamera` (USB + network streams)
- `from camera.backends.image import ImageFileCamera` (still image)
"""
