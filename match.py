# match.py

import logging
from enum import Enum

from skeleton import PLAYER_1, PLAYER_2

logger = logging.getLogger(__name__)


class MatchStatus(str, Enum):
    LOADING = 'loading'
    WAITING = 'waiting'
    PLAYING = 'playing'
    GAMEOVER = 'gameover'


class MatchStateMachine:
    """loading -> waiting -> playing -> gameover, and back to waiting on restart."""

    def __init__(self):
        self.status = MatchStatus.LOADING

    def _transition(self, new_status):
        logger.info("Match %s -> %s", self.status.value, new_status.value)
        self.status = new_status

    def model_ready(self):
        if self.status == MatchStatus.LOADING:
            self._transition(MatchStatus.WAITING)

    def observe_players(self, left_present, right_present) -> bool:
        """Start the fight the first frame both players are seen together. Returns True on start."""
        if self.status == MatchStatus.WAITING and left_present and right_present:
            self._transition(MatchStatus.PLAYING)
            return True
        return False

    def check_knockout(self, p1, p2) -> bool:
        if self.status == MatchStatus.PLAYING and (p1.defeated or p2.defeated):
            self._transition(MatchStatus.GAMEOVER)
            return True
        return False

    def restart(self):
        # A restart cannot skip model loading
        if self.status != MatchStatus.LOADING:
            self._transition(MatchStatus.WAITING)

    @staticmethod
    def winner(p1, p2):
        """1 or 2 for the surviving player, None for a double knockout (or no knockout yet)."""
        if p1.defeated and p2.defeated:
            return None
        if p2.defeated:
            return PLAYER_1
        if p1.defeated:
            return PLAYER_2
        return None

    @property
    def is_processing(self):
        return self.status in (MatchStatus.WAITING, MatchStatus.PLAYING)
