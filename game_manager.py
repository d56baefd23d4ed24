# game_manager.py

import argparse
import logging
import time

import cv2

from fighter_game import FighterGame
from input_module import MODEL_PATH, PoseInput

logger = logging.getLogger(__name__)

WINDOW_TITLE = 'Pose Fighter  |  R = rematch  |  Q = quit'


class GameManager:
    def __init__(self, camera=0, width=1280, height=720, model_path=MODEL_PATH, seed=None):
        self.cap = cv2.VideoCapture(camera)
        if not self.cap.isOpened():
            raise IOError("Cannot open webcam")
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)

        print("Loading pose model...")
        self.pose_input = PoseInput(model_path=model_path)
        self.game = FighterGame(seed=seed)

    def run(self):
        while True:
            ret, frame = self.cap.read()
            if not ret:
                logger.warning("Camera returned no frame, stopping")
                break

            # Stays on the loading screen for good if the model never comes up
            if self.pose_input.ready:
                self.game.model_ready()

            skeletons = self.pose_input.detect(frame)
            height, width = frame.shape[:2]
            self.game.update(skeletons, (width, height), time.time())

            cv2.imshow(WINDOW_TITLE, self.game.render(frame))
            key = cv2.waitKey(1) & 0xFF
            if key in (27, ord('q')):
                break
            self.game.handle_key(key)

        self.cap.release()
        self.pose_input.release()
        cv2.destroyAllWindows()


def main():
    parser = argparse.ArgumentParser(description="Two-player pose-controlled fighting game")
    parser.add_argument("--camera", type=int, default=0, help="Camera index")
    parser.add_argument("--width", type=int, default=1280, help="Requested capture width")
    parser.add_argument("--height", type=int, default=720, help="Requested capture height")
    parser.add_argument("--model", type=str, default=MODEL_PATH, help="Path to the pose landmarker .task file")
    parser.add_argument("--seed", type=int, default=None, help="Seed for rain-volley jitter")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every detected gesture")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    GameManager(camera=args.camera, width=args.width, height=args.height,
                model_path=args.model, seed=args.seed).run()


if __name__ == '__main__':
    main()
