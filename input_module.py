# input_module.py

"""
Pose input using the MediaPipe Tasks API (Pose Landmarker, up to two people).

The model file is downloaded on first run and loaded on a background
thread; until it is ready the game stays in its loading screen.
"""

import logging
import os
import threading
import time
import urllib.request

import cv2
import mediapipe as mp
from mediapipe.tasks import python as mp_python
from mediapipe.tasks.python import vision as mp_vision

from skeleton import Landmark

logger = logging.getLogger(__name__)

MODEL_PATH = "pose_landmarker_lite.task"
MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/"
    "pose_landmarker/pose_landmarker_lite/float16/1/pose_landmarker_lite.task"
)


def _ensure_model(path):
    if not os.path.exists(path):
        logger.info("Downloading pose model from MediaPipe CDN ...")
        urllib.request.urlretrieve(MODEL_URL, path)
        logger.info("Pose model saved to '%s'.", path)


def to_skeletons(result):
    """Convert a PoseLandmarkerResult into lists of Landmark, one per person."""
    skeletons = []
    for pose in result.pose_landmarks or []:
        skeletons.append([Landmark(lm.x, lm.y, lm.z, lm.visibility) for lm in pose])
    return skeletons


class PoseInput:
    """Detects up to two skeletons per frame."""

    def __init__(self, model_path=MODEL_PATH, num_poses=2):
        self.model_path = model_path
        self.num_poses = num_poses
        self._landmarker = None
        self._failed = False
        self._start_ms = int(time.time() * 1000)
        self._last_ts = -1
        self._loader = threading.Thread(target=self._load, daemon=True)
        self._loader.start()

    def _load(self):
        try:
            _ensure_model(self.model_path)
            options = mp_vision.PoseLandmarkerOptions(
                base_options=mp_python.BaseOptions(model_asset_path=self.model_path),
                running_mode=mp_vision.RunningMode.VIDEO,
                num_poses=self.num_poses,
                min_pose_detection_confidence=0.5,
                min_tracking_confidence=0.5,
            )
            self._landmarker = mp_vision.PoseLandmarker.create_from_options(options)
            logger.info("Pose landmarker ready")
        except Exception:
            # No retry: the game stays on its loading screen
            logger.exception("Failed to initialize the pose landmarker")
            self._failed = True

    @property
    def ready(self):
        return self._landmarker is not None

    @property
    def failed(self):
        return self._failed

    def detect(self, frame):
        """Process a BGR frame; returns a list of skeletons (possibly empty)."""
        if not self.ready or frame is None:
            return []

        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)

        # VIDEO mode rejects non-increasing timestamps
        timestamp_ms = max(int(time.time() * 1000) - self._start_ms, self._last_ts + 1)
        self._last_ts = timestamp_ms

        result = self._landmarker.detect_for_video(mp_image, timestamp_ms)
        return to_skeletons(result)

    def release(self):
        if self._landmarker is not None:
            self._landmarker.close()
