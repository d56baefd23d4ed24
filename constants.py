# constants.py

from dataclasses import dataclass


@dataclass(frozen=True)
class CombatRules:
    """Tuning values for gestures, cooldowns and damage.

    Distances are in normalized landmark space (0..1), speeds in pixels per
    frame, cooldowns in frames and the charge window in seconds.
    """
    # Health / damage
    max_hp: int = 100
    damage_normal: int = 2
    damage_blocked: int = 1           # normal punch into a guard
    damage_special: int = 10
    damage_special_blocked: int = 3
    damage_sword: int = 3
    damage_sword_blocked: int = 0
    damage_rain: int = 2              # per falling projectile

    # Special charge
    charge_duration: float = 2.5
    charge_hand_y_diff: float = 0.2   # min vertical gap between wrists
    charge_hand_x_diff: float = 0.4   # max horizontal gap between wrists
    pose_vertical_threshold: float = 0.02

    # Sword
    sword_hand_dist: float = 0.1
    sword_cross_check_x: float = 0.05
    sword_block_buffer: float = 0.35
    sword_swing_threshold: float = 0.015
    sword_cooldown: int = 20

    # Block (crossed arms)
    block_shoulder_dist: float = 0.25
    block_require_cross: bool = True

    # Punch
    punch_cooldown: int = 15
    punch_velocity_threshold: float = 0.05
    punch_direction_threshold: float = 0.02
    arm_extension_threshold: float = 140.0
    punch_reach_threshold: float = 0.1

    # Flap / rain
    flap_wingspan: float = 0.15
    flap_velocity: float = 0.03
    rain_cooldown: int = 90
    rain_count: int = 5
    rain_jitter: float = 0.02
    rain_spawn_y: float = -40.0

    # Projectiles
    projectile_speed: float = 15.0
    projectile_speed_special: float = 10.0
    projectile_speed_slash: float = 25.0
    projectile_speed_rain: float = 12.0

    hit_flash_duration: int = 10
    hitbox_padding: float = 0.05
    notification_duration: float = 2.0


DEFAULT_RULES = CombatRules()
