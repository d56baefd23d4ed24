# simulation.py

import logging
import random

from combat import CombatResolver
from constants import DEFAULT_RULES
from fighter_state import MotionHistory, PlayerState
from gestures import GestureRecognizer
from match import MatchStateMachine, MatchStatus
from notifications import NotificationSink
from projectile import ProjectileFactory
from skeleton import PLAYER_1, PLAYER_2, assign_players, direction_for

logger = logging.getLogger(__name__)


class SimulationContext:
    """All per-match state plus the per-frame pipeline that mutates it.

    One frame: assign skeletons to players -> tick cooldowns -> recognize
    gestures -> move projectiles and resolve hits -> check for a knockout.
    """

    def __init__(self, rules=DEFAULT_RULES, seed=None):
        self.rules = rules
        self.rng = random.Random(seed)
        self.factory = ProjectileFactory(rules, self.rng)
        self.recognizer = GestureRecognizer(rules, self.factory)
        self.resolver = CombatResolver(rules)
        self.match = MatchStateMachine()
        self.notifications = NotificationSink(rules.notification_duration)

        self.players = {}
        self.histories = {}
        self.projectiles = []
        self.skeletons = {}
        self.last_hits = []
        self._reset_players()

    def _reset_players(self):
        self.players = {
            PLAYER_1: PlayerState(PLAYER_1, self.rules.max_hp),
            PLAYER_2: PlayerState(PLAYER_2, self.rules.max_hp),
        }
        self.histories = {PLAYER_1: MotionHistory(), PLAYER_2: MotionHistory()}
        self.projectiles = []
        self.skeletons = {}
        self.last_hits = []

    # --------- lifecycle ---------
    @property
    def status(self):
        return self.match.status

    def model_ready(self):
        self.match.model_ready()

    def restart(self):
        """Back to a fresh match waiting for both players."""
        self._reset_players()
        self.notifications.clear()
        self.match.restart()

    def winner(self):
        return self.match.winner(self.players[PLAYER_1], self.players[PLAYER_2])

    # --------- per-frame processing ---------
    def step(self, skeletons, width, height, now):
        """Process one frame of detections. Returns the CombatActions emitted this frame."""
        if not self.match.is_processing:
            return []
        if width <= 0 or height <= 0:
            logger.warning("Skipping frame with empty viewport %sx%s", width, height)
            return []

        for player in self.players.values():
            player.tick()

        assigned = assign_players(skeletons)
        self.skeletons = assigned

        if self.match.observe_players(PLAYER_1 in assigned, PLAYER_2 in assigned):
            self.notifications.push("FIGHT!", now)

        actions = []
        self.last_hits = []
        if self.match.status != MatchStatus.PLAYING:
            return actions

        for player_id in (PLAYER_1, PLAYER_2):
            landmarks = assigned.get(player_id)
            if landmarks is None:
                continue
            result = self.recognizer.recognize(
                self.players[player_id], self.histories[player_id], landmarks,
                direction_for(player_id), width, height, now)
            if result.notification:
                self.notifications.push(result.notification, now)
            if result.action is not None:
                self.projectiles.extend(result.action.projectiles)
                actions.append(result.action)

        self.last_hits = self.resolver.resolve(
            self.projectiles, self.players, assigned, width, height, now,
            self.match, self.notifications)
        return actions
