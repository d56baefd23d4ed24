# skeleton.py

from collections import namedtuple
from enum import IntEnum


class Landmark(namedtuple('Landmark', ['x', 'y', 'z', 'visibility'])):
    """One normalized keypoint as produced by the pose model."""
    __slots__ = ()

    def __new__(cls, x, y, z=0.0, visibility=None):
        return super().__new__(cls, x, y, z, visibility)


class PoseLandmark(IntEnum):
    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


NUM_LANDMARKS = len(PoseLandmark)

# Head + torso corners
HITBOX_LANDMARKS = (
    PoseLandmark.NOSE,
    PoseLandmark.LEFT_SHOULDER,
    PoseLandmark.RIGHT_SHOULDER,
    PoseLandmark.LEFT_HIP,
    PoseLandmark.RIGHT_HIP,
)

# Upper-body connections used when drawing a skeleton
UPPER_BODY_CONNECTIONS = [
    (PoseLandmark.LEFT_SHOULDER, PoseLandmark.RIGHT_SHOULDER),
    (PoseLandmark.LEFT_SHOULDER, PoseLandmark.LEFT_ELBOW),
    (PoseLandmark.LEFT_ELBOW, PoseLandmark.LEFT_WRIST),
    (PoseLandmark.RIGHT_SHOULDER, PoseLandmark.RIGHT_ELBOW),
    (PoseLandmark.RIGHT_ELBOW, PoseLandmark.RIGHT_WRIST),
    (PoseLandmark.LEFT_SHOULDER, PoseLandmark.LEFT_HIP),
    (PoseLandmark.RIGHT_SHOULDER, PoseLandmark.RIGHT_HIP),
    (PoseLandmark.LEFT_HIP, PoseLandmark.RIGHT_HIP),
]

PLAYER_1 = 1
PLAYER_2 = 2


def assign_players(skeletons):
    """Map detected skeletons to player slots by which half of the image the nose is in.

    The camera image is mirrored for display, so a nose on the image's left
    half (x < 0.5) belongs to the player standing on the visual right
    (Player 2). If two skeletons land on the same side the later one wins.
    """
    assigned = {}
    for landmarks in skeletons:
        # Too short to carry the upper body: nothing to read
        if not landmarks or len(landmarks) <= PoseLandmark.RIGHT_HIP:
            continue
        nose = landmarks[PoseLandmark.NOSE]
        if nose.x < 0.5:
            assigned[PLAYER_2] = landmarks
        else:
            assigned[PLAYER_1] = landmarks
    return assigned


def direction_for(player_id: int) -> int:
    """Sign of the image-x velocity of this player's projectiles."""
    return -1 if player_id == PLAYER_1 else 1


def opponent_of(player_id: int) -> int:
    return PLAYER_2 if player_id == PLAYER_1 else PLAYER_1


def hitbox(landmarks, padding=0.05):
    """Normalized (min_x, min_y, max_x, max_y) box around head and torso, grown by padding."""
    min_x, max_x, min_y, max_y = 1.0, 0.0, 1.0, 0.0
    for idx in HITBOX_LANDMARKS:
        if idx >= len(landmarks) or landmarks[idx] is None:
            continue
        lm = landmarks[idx]
        min_x = min(min_x, lm.x)
        max_x = max(max_x, lm.x)
        min_y = min(min_y, lm.y)
        max_y = max(max_y, lm.y)
    return min_x - padding, min_y - padding, max_x + padding, max_y + padding


def point_in_hitbox(px, py, landmarks, width, height, padding=0.05):
    """Pixel-space point test against the padded hitbox of a skeleton."""
    min_x, min_y, max_x, max_y = hitbox(landmarks, padding)
    nx = px / width
    ny = py / height
    return min_x <= nx <= max_x and min_y <= ny <= max_y
