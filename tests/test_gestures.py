import random
import unittest
from dataclasses import replace

from constants import DEFAULT_RULES
from fighter_state import MotionHistory, PlayerState
from gestures import ActionKind, GestureRecognizer
from pose_factory import history_with, make_skeleton
from projectile import ProjectileFactory, ProjectileKind

WIDTH, HEIGHT = 1000, 1000

# Arms crossed on the chest, each wrist on the opposite shoulder
CROSSED = dict(LEFT_WRIST=(0.42, 0.43), RIGHT_WRIST=(0.58, 0.43))
# Hands together low in front of the body
SWORD_GRIP = dict(LEFT_WRIST=(0.51, 0.85), RIGHT_WRIST=(0.49, 0.85))
# Both arms spread wide
WINGS = dict(LEFT_WRIST=(0.8, 0.35), RIGHT_WRIST=(0.2, 0.35))
# Left hand raised over the head, right hand low
CHARGE = dict(LEFT_WRIST=(0.55, 0.15), RIGHT_WRIST=(0.42, 0.65))


def punch_skeleton():
    """Right arm thrown straight toward low image x (about 170 degrees at the elbow)."""
    return make_skeleton(
        cx=0.55,
        RIGHT_SHOULDER=(0.45, 0.40), RIGHT_ELBOW=(0.32, 0.41), RIGHT_WRIST=(0.20, 0.40),
        LEFT_SHOULDER=(0.65, 0.40), LEFT_ELBOW=(0.67, 0.55), LEFT_WRIST=(0.68, 0.70),
    )


class GestureTestCase(unittest.TestCase):
    rules = DEFAULT_RULES

    def setUp(self):
        self.factory = ProjectileFactory(self.rules, random.Random(7))
        self.recognizer = GestureRecognizer(self.rules, self.factory)
        self.state = PlayerState(1, self.rules.max_hp)

    def recognize(self, skeleton, history, direction=-1, now=0.0, state=None):
        return self.recognizer.recognize(state or self.state, history, skeleton,
                                         direction, WIDTH, HEIGHT, now)


class TestPriorityOrder(GestureTestCase):
    def test_evaluators_in_priority_order(self):
        names = [name for name, _ in self.recognizer.evaluators]
        self.assertEqual(names, ['block', 'sword', 'flap', 'charge', 'punch'])

    def test_neutral_pose_does_nothing_but_refreshes_history(self):
        history = MotionHistory()
        result = self.recognize(make_skeleton(), history)
        self.assertFalse(result.matched)
        self.assertIsNone(result.action)
        self.assertAlmostEqual(history.left_wrist[0], 0.63)
        self.assertAlmostEqual(history.left_wrist[1], 0.7)


class TestBlock(GestureTestCase):
    def test_crossed_arms_block_regardless_of_velocity(self):
        # Wrists come from far away: a punch would qualify if block did not win
        history = history_with((0.95, 0.43), (0.95, 0.43))
        self.state.charge.active = True
        self.state.charge.progress = 0.5
        result = self.recognize(make_skeleton(**CROSSED), history)
        self.assertTrue(result.matched)
        self.assertIsNone(result.action)
        self.assertTrue(self.state.is_blocking)
        self.assertFalse(self.state.charge.active)
        self.assertEqual(self.state.charge.progress, 0.0)
        self.assertEqual(self.state.punch_cooldown, 0)

    def test_block_clears_when_arms_open(self):
        self.recognize(make_skeleton(**CROSSED), MotionHistory())
        self.assertTrue(self.state.is_blocking)
        self.recognize(make_skeleton(), MotionHistory())
        self.assertFalse(self.state.is_blocking)

    def test_overlap_without_cross_is_not_a_block(self):
        # Narrow shoulders; wrists near the opposite shoulders but not crossed over
        skeleton = make_skeleton(
            RIGHT_SHOULDER=(0.45, 0.4), LEFT_SHOULDER=(0.55, 0.4),
            LEFT_WRIST=(0.52, 0.42), RIGHT_WRIST=(0.48, 0.42))
        self.recognize(skeleton, MotionHistory())
        self.assertFalse(self.state.is_blocking)

        lenient = GestureRecognizer(replace(DEFAULT_RULES, block_require_cross=False), self.factory)
        lenient.recognize(self.state, MotionHistory(), skeleton, -1, WIDTH, HEIGHT, 0.0)
        self.assertTrue(self.state.is_blocking)


class TestSword(GestureTestCase):
    def test_fast_swing_throws_slash(self):
        history = history_with((0.51, 0.80), (0.49, 0.80))
        result = self.recognize(make_skeleton(**SWORD_GRIP), history, direction=-1)
        self.assertEqual(result.action.kind, ActionKind.SLASH)
        slash, = result.action.projectiles
        self.assertEqual(slash.kind, ProjectileKind.SLASH)
        self.assertAlmostEqual(slash.x, 500.0)
        self.assertAlmostEqual(slash.y, 850.0)
        self.assertEqual(slash.vx, -self.rules.projectile_speed_slash)
        self.assertEqual(slash.damage, self.rules.damage_sword)
        self.assertEqual(self.state.sword_cooldown, self.rules.sword_cooldown)

    def test_stance_on_cooldown_suppresses_other_attacks(self):
        self.state.sword_cooldown = 5
        history = history_with((0.9, 0.80), (0.9, 0.80))
        result = self.recognize(make_skeleton(**SWORD_GRIP), history)
        self.assertTrue(result.matched)
        self.assertIsNone(result.action)
        self.assertEqual(self.state.punch_cooldown, 0)

    def test_still_stance_does_not_swing(self):
        history = history_with((0.51, 0.85), (0.49, 0.85))
        result = self.recognize(make_skeleton(**SWORD_GRIP), history)
        self.assertTrue(result.matched)
        self.assertIsNone(result.action)
        self.assertEqual(self.state.sword_cooldown, 0)

    def test_stance_cancels_charge(self):
        self.state.charge.active = True
        self.state.charge.progress = 0.4
        self.recognize(make_skeleton(**SWORD_GRIP), history_with((0.51, 0.85), (0.49, 0.85)))
        self.assertFalse(self.state.charge.active)
        self.assertEqual(self.state.charge.progress, 0.0)

    def test_hands_together_near_shoulder_is_not_a_sword(self):
        # Close enough to the opposite shoulders to be the start of a block
        skeleton = make_skeleton(LEFT_WRIST=(0.51, 0.55), RIGHT_WRIST=(0.49, 0.55))
        history = history_with((0.51, 0.40), (0.49, 0.40))
        result = self.recognize(skeleton, history)
        self.assertTrue(result.matched)
        self.assertIsNone(result.action)
        self.assertEqual(self.state.sword_cooldown, 0)


class TestFlap(GestureTestCase):
    def test_flap_drops_rain_volley(self):
        history = history_with((0.8, 0.45), (0.2, 0.45))
        result = self.recognize(make_skeleton(**WINGS), history)
        self.assertEqual(result.action.kind, ActionKind.RAIN)
        volley = result.action.projectiles
        self.assertEqual(len(volley), self.rules.rain_count)
        self.assertEqual(self.state.rain_cooldown, self.rules.rain_cooldown)
        for proj in volley:
            self.assertEqual(proj.kind, ProjectileKind.AREA)
            self.assertEqual(proj.vx, 0.0)
            self.assertGreater(proj.vy, 0)
            self.assertLess(proj.y, 0)
            # Player 1's rain lands on the opponent in the image-left half
            self.assertLess(proj.x, WIDTH / 2)
        xs = [proj.x for proj in volley]
        self.assertEqual(xs, sorted(xs))

    def test_flap_needs_vertical_motion(self):
        history = history_with((0.8, 0.35), (0.2, 0.35))
        result = self.recognize(make_skeleton(**WINGS), history)
        self.assertIsNone(result.action)
        self.assertEqual(self.state.rain_cooldown, 0)

    def test_flap_on_cooldown(self):
        self.state.rain_cooldown = 10
        history = history_with((0.8, 0.45), (0.2, 0.45))
        result = self.recognize(make_skeleton(**WINGS), history)
        self.assertIsNone(result.action)

    def test_flap_without_history_is_ignored(self):
        result = self.recognize(make_skeleton(**WINGS), MotionHistory())
        self.assertIsNone(result.action)


class TestCharge(GestureTestCase):
    def test_hold_then_release_fires_special(self):
        history = MotionHistory()
        charge = self.state.charge

        self.recognize(make_skeleton(**CHARGE), history, now=10.0)
        self.assertTrue(charge.active)
        self.assertEqual(charge.progress, 0.0)

        self.recognize(make_skeleton(**CHARGE), history, now=11.0)
        self.assertAlmostEqual(charge.progress, 0.4)
        self.assertFalse(charge.complete)

        self.recognize(make_skeleton(**CHARGE), history, now=12.6)
        self.assertEqual(charge.progress, 1.0)
        self.assertTrue(charge.complete)

        result = self.recognize(make_skeleton(), history, direction=1, now=13.0)
        self.assertEqual(result.action.kind, ActionKind.SPECIAL)
        self.assertEqual(result.notification, "SPECIAL BLAST!")
        special, = result.action.projectiles
        self.assertEqual(special.vx, self.rules.projectile_speed_special)
        self.assertEqual(special.damage, self.rules.damage_special)
        self.assertFalse(charge.active)
        self.assertEqual(charge.progress, 0.0)
        self.assertFalse(charge.complete)

    def test_early_release_fizzles(self):
        history = MotionHistory()
        self.recognize(make_skeleton(**CHARGE), history, now=0.0)
        self.recognize(make_skeleton(**CHARGE), history, now=1.0)
        result = self.recognize(make_skeleton(), history, now=1.1)
        self.assertTrue(result.matched)
        self.assertIsNone(result.action)
        self.assertFalse(self.state.charge.active)
        self.assertEqual(self.state.charge.progress, 0.0)

    def test_both_hands_low_is_not_a_charge(self):
        skeleton = make_skeleton(LEFT_WRIST=(0.55, 0.45), RIGHT_WRIST=(0.45, 0.9))
        self.recognize(skeleton, MotionHistory(), now=0.0)
        self.assertFalse(self.state.charge.active)

    def test_super_armor_keeps_charge_through_hit(self):
        history = MotionHistory()
        self.recognize(make_skeleton(**CHARGE), history, now=0.0)
        self.state.is_hit = True
        result = self.recognize(make_skeleton(), history, now=1.0)
        self.assertTrue(result.matched)
        self.assertTrue(self.state.charge.active)
        self.assertAlmostEqual(self.state.charge.progress, 0.4)

        self.state.is_hit = False
        self.recognize(make_skeleton(), history, now=1.2)
        self.assertFalse(self.state.charge.active)

    def test_progress_never_decreases_while_active(self):
        history = MotionHistory()
        last = 0.0
        for now in (0.0, 0.5, 0.4, 1.0, 3.0, 4.0):
            self.recognize(make_skeleton(**CHARGE), history, now=now)
            self.assertGreaterEqual(self.state.charge.progress, last)
            last = self.state.charge.progress
        self.assertEqual(last, 1.0)


class TestPunch(GestureTestCase):
    def test_thrust_fires_one_normal_projectile(self):
        history = history_with((0.68, 0.70), (0.40, 0.40))
        result = self.recognize(punch_skeleton(), history, direction=-1)
        self.assertEqual(result.action.kind, ActionKind.PUNCH)
        punch, = result.action.projectiles
        self.assertEqual(punch.kind, ProjectileKind.NORMAL)
        self.assertAlmostEqual(punch.x, 200.0)
        self.assertAlmostEqual(punch.y, 400.0)
        self.assertLess(punch.vx, 0)
        self.assertEqual(punch.vy, 0.0)
        self.assertEqual(punch.damage, self.rules.damage_normal)
        self.assertEqual(self.state.punch_cooldown, self.rules.punch_cooldown)

    def test_first_frame_only_seeds_history(self):
        history = MotionHistory()
        result = self.recognize(punch_skeleton(), history)
        self.assertIsNone(result.action)
        self.assertEqual(history.right_wrist, (0.20, 0.40))

    def test_cooldown_blocks_punch(self):
        self.state.punch_cooldown = 1
        history = history_with((0.68, 0.70), (0.40, 0.40))
        self.assertIsNone(self.recognize(punch_skeleton(), history).action)

    def test_motion_away_from_opponent_is_not_a_punch(self):
        history = history_with((0.68, 0.70), (0.40, 0.40))
        self.assertIsNone(self.recognize(punch_skeleton(), history, direction=1).action)

    def test_bent_arm_is_not_a_punch(self):
        skeleton = make_skeleton(
            cx=0.55,
            RIGHT_SHOULDER=(0.45, 0.40), RIGHT_ELBOW=(0.35, 0.60), RIGHT_WRIST=(0.20, 0.40),
            LEFT_SHOULDER=(0.65, 0.40), LEFT_ELBOW=(0.67, 0.55), LEFT_WRIST=(0.68, 0.70))
        history = history_with((0.68, 0.70), (0.40, 0.40))
        self.assertIsNone(self.recognize(skeleton, history).action)

    def test_two_punching_hands_fire_once(self):
        skeleton = make_skeleton(
            cx=0.55,
            RIGHT_SHOULDER=(0.45, 0.40), RIGHT_ELBOW=(0.32, 0.41), RIGHT_WRIST=(0.20, 0.40),
            LEFT_SHOULDER=(0.65, 0.40), LEFT_ELBOW=(0.52, 0.41), LEFT_WRIST=(0.40, 0.40))
        history = history_with((0.60, 0.40), (0.40, 0.40))
        result = self.recognize(skeleton, history)
        self.assertEqual(len(result.action.projectiles), 1)
        # Left hand is evaluated first
        self.assertAlmostEqual(result.action.projectiles[0].x, 400.0)


if __name__ == '__main__':
    unittest.main()
