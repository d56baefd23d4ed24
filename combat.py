# combat.py

import logging
from collections import namedtuple

from projectile import ProjectileKind
from skeleton import PLAYER_1, PLAYER_2, opponent_of, point_in_hitbox

logger = logging.getLogger(__name__)

Hit = namedtuple('Hit', ['projectile', 'target', 'damage', 'blocked'])


class CombatResolver:
    """Moves projectiles, tests them against the opponent's hitbox and applies damage."""

    def __init__(self, rules):
        self.rules = rules

    def outcome(self, projectile, blocking):
        """(damage, flag_hit, notification) for a projectile landing on a target."""
        rules = self.rules
        kind = projectile.kind

        if kind == ProjectileKind.AREA:
            # Anti-guard: only punishes a player who is blocking
            if blocking:
                return projectile.damage, True, "GUARD BREAK!"
            return 0, False, "MISSED!"

        if not blocking:
            return projectile.damage, True, None

        if kind == ProjectileKind.SLASH:
            return rules.damage_sword_blocked, False, "FULL BLOCK!"
        if kind == ProjectileKind.SPECIAL:
            return rules.damage_special_blocked, False, "HEAVY HIT!"
        return rules.damage_blocked, False, "BLOCKED!"

    def resolve(self, projectiles, players, skeletons, width, height, now, match, notifications):
        """Advance every projectile one frame and resolve collisions in place.

        Returns the list of hits this frame. At most one hit per projectile;
        a projectile that hits is removed.
        """
        hits = []
        survivors = []
        for proj in projectiles:
            proj.advance()

            if proj.out_of_bounds(width, height):
                continue

            target_id = opponent_of(proj.owner)
            target_landmarks = skeletons.get(target_id)
            if not target_landmarks or not point_in_hitbox(
                    proj.x, proj.y, target_landmarks, width, height, self.rules.hitbox_padding):
                survivors.append(proj)
                continue

            target = players[target_id]
            blocking = target.is_blocking
            damage, flag_hit, notification = self.outcome(proj, blocking)

            if flag_hit:
                target.take_damage(damage, self.rules.hit_flash_duration)
            elif damage:
                target.take_damage(damage)

            logger.debug("%r hit P%d for %d (blocking=%s)", proj, target_id, damage, blocking)
            hits.append(Hit(proj, target_id, damage, blocking))
            if notification:
                notifications.push(notification, now)

            if damage:
                match.check_knockout(players[PLAYER_1], players[PLAYER_2])

        projectiles[:] = survivors
        return hits
