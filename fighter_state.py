# fighter_state.py

from helpers import midpoint, xy
from skeleton import PoseLandmark

# Sentinel for "no prior sample yet"
NO_SAMPLE = (0.0, 0.0)


class Charge:
    def __init__(self):
        self.active = False
        self.progress = 0.0   # 0.0 .. 1.0
        self.complete = False
        self.start_time = 0.0

    def reset(self):
        self.active = False
        self.progress = 0.0
        self.complete = False


class PlayerState:
    """Health, guard, hit flash, per-family cooldowns and charge of one fighter."""

    def __init__(self, player_id: int, max_hp: int = 100):
        self.player_id = player_id
        self.hp = max_hp
        self.max_hp = max_hp

        # Guard, recomputed every frame the player is tracked
        self.is_blocking = False

        # Hit flash
        self.is_hit = False
        self.hit_timer = 0

        # Cooldowns (frames)
        self.punch_cooldown = 0
        self.sword_cooldown = 0
        self.rain_cooldown = 0

        self.charge = Charge()

    @property
    def defeated(self):
        return self.hp <= 0

    def tick(self):
        """Advance one frame: run down the hit flash and every cooldown."""
        if self.hit_timer > 0:
            self.hit_timer -= 1
        else:
            self.is_hit = False

        if self.punch_cooldown > 0:
            self.punch_cooldown -= 1
        if self.sword_cooldown > 0:
            self.sword_cooldown -= 1
        if self.rain_cooldown > 0:
            self.rain_cooldown -= 1

    def take_damage(self, amount, flash_frames=0):
        # Not clamped: hp <= 0 is read as defeated by the match state machine.
        self.hp -= amount
        if flash_frames:
            self.is_hit = True
            self.hit_timer = flash_frames

    def cancel_charge(self):
        self.charge.reset()


class MotionHistory:
    """Previous-frame wrist positions and hand-center height of one fighter."""

    def __init__(self):
        self.left_wrist = NO_SAMPLE
        self.right_wrist = NO_SAMPLE
        self.hand_center_y = 0.0

    def wrist(self, side: str):
        return self.left_wrist if side == 'left' else self.right_wrist

    def has_wrist_sample(self, side: str) -> bool:
        return self.wrist(side) != NO_SAMPLE

    def has_hand_center_sample(self) -> bool:
        return self.hand_center_y != 0.0

    def refresh(self, landmarks):
        """Store this frame's wrists so the next frame can derive velocities."""
        left = xy(landmarks[PoseLandmark.LEFT_WRIST])
        right = xy(landmarks[PoseLandmark.RIGHT_WRIST])
        self.left_wrist = left
        self.right_wrist = right
        self.hand_center_y = midpoint(left, right)[1]
