# projectile.py

import itertools
import random
from enum import Enum

from skeleton import PLAYER_1


class ProjectileKind(str, Enum):
    NORMAL = 'normal'
    SPECIAL = 'special'
    SLASH = 'slash'
    AREA = 'area'


class Projectile:
    def __init__(self, pid: int, x: float, y: float, vx: float, vy: float,
                 owner: int, kind: ProjectileKind, damage: int):
        self.id = pid
        self.x = float(x)
        self.y = float(y)
        # Velocity is fixed at spawn
        self._vx = float(vx)
        self._vy = float(vy)
        self.owner = owner
        self.kind = kind
        self.damage = damage

    @property
    def vx(self):
        return self._vx

    @property
    def vy(self):
        return self._vy

    def advance(self):
        self.x += self._vx
        self.y += self._vy

    def out_of_bounds(self, width, height) -> bool:
        if self.x < 0 or self.x > width:
            return True
        # Only falling projectiles can leave through the bottom
        return self._vy > 0 and self.y > height

    def __repr__(self):
        return (f"Projectile(id={self.id}, kind={self.kind.value}, owner={self.owner}, "
                f"pos=({self.x:.1f}, {self.y:.1f}), v=({self._vx}, {self._vy}))")


class ProjectileFactory:
    """Builds projectiles with sequential ids and the speeds/damage of a ruleset."""

    def __init__(self, rules, rng=None):
        self.rules = rules
        self.rng = rng or random.Random()
        self._ids = itertools.count(1)

    def _make(self, x, y, vx, vy, owner, kind, damage):
        return Projectile(next(self._ids), x, y, vx, vy, owner, kind, damage)

    def punch(self, owner, x, y, direction):
        return self._make(x, y, direction * self.rules.projectile_speed, 0.0,
                          owner, ProjectileKind.NORMAL, self.rules.damage_normal)

    def slash(self, owner, x, y, direction):
        return self._make(x, y, direction * self.rules.projectile_speed_slash, 0.0,
                          owner, ProjectileKind.SLASH, self.rules.damage_sword)

    def special(self, owner, x, y, direction):
        return self._make(x, y, direction * self.rules.projectile_speed_special, 0.0,
                          owner, ProjectileKind.SPECIAL, self.rules.damage_special)

    def rain(self, owner, width):
        """A volley falling from above the frame over the opponent's half of the image."""
        # Player 1 fires toward low image x, so the opponent stands in the left half
        band_start, band_end = (0.05, 0.45) if owner == PLAYER_1 else (0.55, 0.95)
        count = self.rules.rain_count
        step = (band_end - band_start) / count
        volley = []
        for i in range(count):
            jitter = self.rng.uniform(-self.rules.rain_jitter, self.rules.rain_jitter)
            nx = band_start + (i + 0.5) * step + jitter
            volley.append(self._make(nx * width, self.rules.rain_spawn_y, 0.0,
                                     self.rules.projectile_speed_rain, owner,
                                     ProjectileKind.AREA, self.rules.damage_rain))
        return volley
