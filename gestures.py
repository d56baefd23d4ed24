# gestures.py

"""
Pose-based gesture recognizer.

Gesture classes are checked in a fixed priority order and the first one
that matches consumes the frame:

  1. block   - arms crossed, each wrist on the opposite shoulder
  2. sword   - wrists together; a fast vertical swing throws a slash
  3. flap    - both arms spread and flapping; drops a rain volley
  4. charge  - one hand raised above the other; release fires a special
  5. punch   - a fast, straight thrust toward the opponent
"""

import logging
from collections import namedtuple
from enum import Enum

from helpers import calculate_angle, calculate_distance, midpoint, xy
from skeleton import PoseLandmark

logger = logging.getLogger(__name__)


class ActionKind(str, Enum):
    PUNCH = 'punch'
    SLASH = 'slash'
    RAIN = 'rain'
    SPECIAL = 'special'


class CombatAction:
    def __init__(self, player_id: int, kind: ActionKind, projectiles):
        self.player_id = player_id
        self.kind = kind
        self.projectiles = list(projectiles)

    def __repr__(self):
        return f"CombatAction(player={self.player_id}, kind={self.kind.value}, projectiles={len(self.projectiles)})"


GestureResult = namedtuple('GestureResult', ['matched', 'action', 'notification'])
NO_MATCH = GestureResult(False, None, None)


def matched(action=None, notification=None):
    return GestureResult(True, action, notification)


class PoseFrame:
    """The landmarks of one fighter for one frame, plus what the evaluators need around them."""

    def __init__(self, landmarks, direction, width, height, now):
        self.landmarks = landmarks
        self.direction = direction
        self.width = width
        self.height = height
        self.now = now

        self.left_wrist = landmarks[PoseLandmark.LEFT_WRIST]
        self.right_wrist = landmarks[PoseLandmark.RIGHT_WRIST]
        self.left_elbow = landmarks[PoseLandmark.LEFT_ELBOW]
        self.right_elbow = landmarks[PoseLandmark.RIGHT_ELBOW]
        self.left_shoulder = landmarks[PoseLandmark.LEFT_SHOULDER]
        self.right_shoulder = landmarks[PoseLandmark.RIGHT_SHOULDER]

        # Wrist to OPPOSITE shoulder
        self.dist_l_to_r = calculate_distance(xy(self.left_wrist), xy(self.right_shoulder))
        self.dist_r_to_l = calculate_distance(xy(self.right_wrist), xy(self.left_shoulder))

    def hand_center(self):
        return midpoint(xy(self.left_wrist), xy(self.right_wrist))

    def to_pixels(self, point):
        return point[0] * self.width, point[1] * self.height


class GestureRecognizer:
    def __init__(self, rules, factory):
        self.rules = rules
        self.factory = factory
        self.evaluators = [
            ('block', self.detect_block),
            ('sword', self.detect_sword),
            ('flap', self.detect_flap),
            ('charge', self.detect_charge),
            ('punch', self.detect_punch),
        ]

    def recognize(self, state, history, landmarks, direction, width, height, now):
        """Run the evaluators in priority order for one fighter; returns the first match or NO_MATCH.

        The motion history is refreshed with this frame's wrists whatever the outcome.
        """
        pose = PoseFrame(landmarks, direction, width, height, now)
        result = NO_MATCH
        for name, evaluator in self.evaluators:
            result = evaluator(state, history, pose)
            if result.matched:
                if result.action is not None:
                    logger.debug("P%d %s -> %r", state.player_id, name, result.action)
                break

        history.refresh(landmarks)
        return result

    # --------- BLOCK (crossed arms) ---------
    def detect_block(self, state, history, pose):
        rules = self.rules
        near_shoulders = (pose.dist_l_to_r < rules.block_shoulder_dist and
                          pose.dist_r_to_l < rules.block_shoulder_dist)
        # A real cross puts the right wrist on the image-right of the left wrist
        crossed = pose.right_wrist.x > pose.left_wrist.x if rules.block_require_cross else True

        if near_shoulders and crossed:
            state.is_blocking = True
            state.cancel_charge()
            return matched()

        state.is_blocking = False
        return NO_MATCH

    # --------- SWORD (hands together, swing) ---------
    def detect_sword(self, state, history, pose):
        rules = self.rules
        wrist_dist = calculate_distance(xy(pose.left_wrist), xy(pose.right_wrist))
        if wrist_dist >= rules.sword_hand_dist:
            return NO_MATCH

        # Hands together on their way into a cross: neither a sword nor anything else this frame
        if pose.right_wrist.x - pose.left_wrist.x > rules.sword_cross_check_x:
            return matched()
        if pose.dist_l_to_r < rules.sword_block_buffer or pose.dist_r_to_l < rules.sword_block_buffer:
            return matched()

        state.cancel_charge()

        center = pose.hand_center()
        if not history.has_hand_center_sample():
            return matched()

        vy = center[1] - history.hand_center_y
        if abs(vy) > rules.sword_swing_threshold and state.sword_cooldown == 0:
            x, y = pose.to_pixels(center)
            slash = self.factory.slash(state.player_id, x, y, pose.direction)
            state.sword_cooldown = rules.sword_cooldown
            return matched(CombatAction(state.player_id, ActionKind.SLASH, [slash]))

        return matched()

    # --------- FLAP (arms spread, beating) ---------
    def detect_flap(self, state, history, pose):
        rules = self.rules
        if state.rain_cooldown > 0:
            return NO_MATCH
        if not (history.has_wrist_sample('left') and history.has_wrist_sample('right')):
            return NO_MATCH

        # Outward is away from the other shoulder, whichever way the body faces
        side_sign = 1.0 if pose.left_shoulder.x >= pose.right_shoulder.x else -1.0
        left_out = (pose.left_wrist.x - pose.left_shoulder.x) * side_sign > rules.flap_wingspan
        right_out = (pose.right_shoulder.x - pose.right_wrist.x) * side_sign > rules.flap_wingspan
        if not (left_out and right_out):
            return NO_MATCH

        left_dy = abs(pose.left_wrist.y - history.left_wrist[1])
        right_dy = abs(pose.right_wrist.y - history.right_wrist[1])
        if left_dy <= rules.flap_velocity or right_dy <= rules.flap_velocity:
            return NO_MATCH

        state.rain_cooldown = rules.rain_cooldown
        volley = self.factory.rain(state.player_id, pose.width)
        return matched(CombatAction(state.player_id, ActionKind.RAIN, volley))

    # --------- CHARGE / SPECIAL ---------
    def is_charge_pose(self, pose):
        rules = self.rules
        lw, rw = pose.left_wrist, pose.right_wrist
        y_gap = abs(lw.y - rw.y)
        x_gap = abs(lw.x - rw.x)
        left_up = lw.y < pose.left_shoulder.y - rules.pose_vertical_threshold
        right_up = rw.y < pose.right_shoulder.y - rules.pose_vertical_threshold
        return (y_gap > rules.charge_hand_y_diff and
                x_gap < rules.charge_hand_x_diff and
                (left_up or right_up))

    def detect_charge(self, state, history, pose):
        charge = state.charge

        # Super armor: being hit does not break a charge already in progress
        if self.is_charge_pose(pose) or (charge.active and state.is_hit):
            if not charge.active:
                charge.active = True
                charge.start_time = pose.now
                charge.progress = 0.0
                charge.complete = False

            elapsed = pose.now - charge.start_time
            charge.progress = max(charge.progress, min(1.0, elapsed / self.rules.charge_duration))
            if charge.progress >= 1.0:
                charge.complete = True
            return matched()

        if not charge.active:
            return NO_MATCH

        # Released (and not being hit): fire if fully charged, otherwise fizzle
        action = None
        notification = None
        if charge.complete:
            x, y = pose.to_pixels(pose.hand_center())
            special = self.factory.special(state.player_id, x, y, pose.direction)
            action = CombatAction(state.player_id, ActionKind.SPECIAL, [special])
            notification = "SPECIAL BLAST!"
        state.cancel_charge()
        return matched(action, notification)

    # --------- PUNCH (either arm) ---------
    def detect_punch(self, state, history, pose):
        """
        A hand punches when ALL are true:
          1) wrist moved faster than the velocity threshold since last frame
          2) arm extension: angle(shoulder-elbow-wrist) > extension threshold
          3) the horizontal motion points at the opponent
          4) wrist is past the elbow and far enough from the shoulder (reach)
        The left hand is checked first; at most one punch per frame.
        """
        rules = self.rules
        if state.punch_cooldown > 0:
            return NO_MATCH

        arms = (
            ('left', pose.left_shoulder, pose.left_elbow, pose.left_wrist),
            ('right', pose.right_shoulder, pose.right_elbow, pose.right_wrist),
        )
        for side, shoulder, elbow, wrist in arms:
            if not history.has_wrist_sample(side):
                continue

            prev = history.wrist(side)
            vx = wrist.x - prev[0]
            velocity = calculate_distance(xy(wrist), prev)
            arm_angle = calculate_angle(xy(shoulder), xy(elbow), xy(wrist))

            is_forward = vx * pose.direction > rules.punch_direction_threshold
            past_elbow = (wrist.x - elbow.x) * pose.direction > 0
            has_reach = abs(wrist.x - shoulder.x) > rules.punch_reach_threshold

            if (velocity > rules.punch_velocity_threshold and
                    arm_angle > rules.arm_extension_threshold and
                    is_forward and past_elbow and has_reach):
                x, y = pose.to_pixels(xy(wrist))
                punch = self.factory.punch(state.player_id, x, y, pose.direction)
                state.punch_cooldown = rules.punch_cooldown
                return matched(CombatAction(state.player_id, ActionKind.PUNCH, [punch]))

        return NO_MATCH
