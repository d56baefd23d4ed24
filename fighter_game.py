# fighter_game.py

import logging
import os

import cv2
import pygame

from constants import DEFAULT_RULES
from game import Game
from gestures import ActionKind
from match import MatchStatus
from projectile import ProjectileKind
from simulation import SimulationContext
from skeleton import PLAYER_1, PLAYER_2, UPPER_BODY_CONNECTIONS, PoseLandmark, hitbox

logger = logging.getLogger(__name__)

# BGR
PLAYER_COLORS = {PLAYER_1: (255, 150, 50), PLAYER_2: (60, 60, 255)}
PROJECTILE_COLORS = {
    ProjectileKind.NORMAL: (255, 255, 255),
    ProjectileKind.SPECIAL: (255, 255, 0),
    ProjectileKind.SLASH: (50, 50, 255),
    ProjectileKind.AREA: (80, 220, 80),
}
PROJECTILE_RADIUS = {
    ProjectileKind.NORMAL: 30,
    ProjectileKind.SPECIAL: 60,
    ProjectileKind.SLASH: 40,
    ProjectileKind.AREA: 18,
}

CONTROLS = [
    "Punch: Thrust Hand",
    "Sword: Hands Together & Swing",
    "Special: One Hand Up (Hold)",
    "Rain: Flap Arms (Breaks Guard)",
    "Block: Cross Arms on Chest",
]


class FighterGame(Game):
    def __init__(self, rules=DEFAULT_RULES, seed=None):
        self.ctx = SimulationContext(rules, seed=seed)
        self.frame_size = (0, 0)
        self.now = 0.0

        # Initialize sound (optional)
        self.sounds = {}
        try:
            pygame.mixer.init()
            for name, volume in (('punch', 0.5), ('slash', 0.6), ('special', 0.7),
                                 ('rain', 0.5), ('block', 0.4)):
                path = os.path.join('assets', 'sounds', f'{name}.mp3')
                if os.path.exists(path):
                    sound = pygame.mixer.Sound(path)
                    sound.set_volume(volume)
                    self.sounds[name] = sound
        except pygame.error as e:
            logger.warning("Sound init failed: %s. Running without sound.", e)
            self.sounds = {}

    def _play(self, name):
        sound = self.sounds.get(name)
        if sound is None:
            return
        try:
            sound.play()
        except pygame.error as e:
            logger.warning("Could not play '%s': %s", name, e)

    # --------- engine integration ---------
    def model_ready(self):
        self.ctx.model_ready()

    def reset(self):
        """Rematch: fresh health, cooldowns and an empty arena."""
        self.ctx.restart()

    def handle_key(self, key):
        if key == ord('r'):
            self.reset()

    def update(self, skeletons, frame_size, now):
        self.frame_size = frame_size
        self.now = now
        width, height = frame_size
        actions = self.ctx.step(skeletons, width, height, now)

        for action in actions:
            if action.kind == ActionKind.PUNCH:
                self._play('punch')
            elif action.kind == ActionKind.SLASH:
                self._play('slash')
            elif action.kind == ActionKind.SPECIAL:
                self._play('special')
            elif action.kind == ActionKind.RAIN:
                self._play('rain')
        for hit in self.ctx.last_hits:
            if hit.blocked:
                self._play('block')

    # --------- rendering ---------
    def _draw_fighter(self, frame, player_id, landmarks):
        height, width, _ = frame.shape
        state = self.ctx.players[player_id]
        color = PLAYER_COLORS[player_id]

        def px(idx):
            lm = landmarks[idx]
            return int(lm.x * width), int(lm.y * height)

        for start, end in UPPER_BODY_CONNECTIONS:
            cv2.line(frame, px(start), px(end), color, 3)
        for idx in (PoseLandmark.NOSE, PoseLandmark.LEFT_WRIST, PoseLandmark.RIGHT_WRIST):
            cv2.circle(frame, px(idx), 6, (255, 255, 255), -1)

        min_x, min_y, max_x, max_y = hitbox(landmarks, self.ctx.rules.hitbox_padding)
        top_left = (int(min_x * width), int(min_y * height))
        bottom_right = (int(max_x * width), int(max_y * height))

        # Hit flash
        if state.is_hit:
            overlay = frame.copy()
            cv2.rectangle(overlay, top_left, bottom_right, (0, 0, 255), -1)
            cv2.addWeighted(overlay, 0.45, frame, 0.55, 0, frame)
        else:
            cv2.rectangle(frame, top_left, bottom_right, color, 1)

        # Shield
        if state.is_blocking:
            cx = (top_left[0] + bottom_right[0]) // 2
            cy = top_left[1] + (bottom_right[1] - top_left[1]) // 3
            axes = (int((bottom_right[0] - top_left[0]) * 0.75), int((bottom_right[1] - top_left[1]) * 0.4))
            cv2.ellipse(frame, (cx, cy), axes, 0, 0, 360, (0, 215, 255), 4)

        # Charge orb grows with progress
        if state.charge.active:
            lw = landmarks[PoseLandmark.LEFT_WRIST]
            rw = landmarks[PoseLandmark.RIGHT_WRIST]
            center = (int((lw.x + rw.x) / 2 * width), int((lw.y + rw.y) / 2 * height))
            radius = max(2, int(state.charge.progress * 75))
            if state.charge.complete:
                cv2.circle(frame, center, radius + 10, (255, 255, 120), 2)
            cv2.circle(frame, center, radius, (255, 255, 0), -1)
            cv2.circle(frame, center, max(1, radius // 2), (255, 255, 255), -1)

    def _draw_projectiles(self, frame):
        for proj in self.ctx.projectiles:
            pos = (int(proj.x), int(proj.y))
            color = PROJECTILE_COLORS[proj.kind]
            radius = PROJECTILE_RADIUS[proj.kind]
            if proj.kind == ProjectileKind.SLASH:
                # Crescent facing the direction of travel
                start = -90 if proj.vx > 0 else 90
                cv2.ellipse(frame, pos, (radius // 2, radius * 2), 0, start, start + 180, color, 6)
            else:
                cv2.circle(frame, pos, radius, color, 2)
                cv2.circle(frame, pos, max(2, radius // 2), color, -1)

    def _draw_hp_bar(self, frame, player, x, y, w, h, font, scale, thick, left):
        ratio = max(0.0, player.hp / player.max_hp)
        filled = int(w * ratio)
        col = (30, 200, 30) if ratio >= 0.3 else (0, 0, 220)
        cv2.rectangle(frame, (x, y), (x + w, y + h), (50, 50, 50), -1)
        if left:
            cv2.rectangle(frame, (x, y), (x + filled, y + h), col, -1)
        else:
            cv2.rectangle(frame, (x + w - filled, y), (x + w, y + h), col, -1)
        cv2.rectangle(frame, (x, y), (x + w, y + h), (180, 180, 180), 2)
        label = f"PLAYER {player.player_id}  {max(0, player.hp)}"
        cv2.putText(frame, label, (x, y + h + int(30 * scale)), font, scale, (255, 255, 255), thick)

    def _center_text(self, frame, text, y, font, scale, color, thick):
        width = frame.shape[1]
        size = cv2.getTextSize(text, font, scale, thick)[0]
        cv2.putText(frame, text, (width // 2 - size[0] // 2, y), font, scale, color, thick)

    def render(self, frame):
        """Draw fighters and projectiles in camera space, mirror, then draw the HUD."""
        ctx = self.ctx
        for player_id, landmarks in ctx.skeletons.items():
            self._draw_fighter(frame, player_id, landmarks)
        self._draw_projectiles(frame)

        # The camera faces the players: show it as a mirror
        frame = cv2.flip(frame, 1)

        height, width, _ = frame.shape
        s = min(width / 1920.0, height / 1080.0)
        font = cv2.FONT_HERSHEY_SIMPLEX
        thick = max(1, int(2 * s))
        margin = max(8, int(30 * s))
        bar_w = int(width * 0.38)
        bar_h = max(12, int(40 * s))

        self._draw_hp_bar(frame, ctx.players[PLAYER_1], margin, margin, bar_w, bar_h,
                          font, 0.9 * s, thick, left=True)
        self._draw_hp_bar(frame, ctx.players[PLAYER_2], width - margin - bar_w, margin, bar_w, bar_h,
                          font, 0.9 * s, thick, left=False)
        self._center_text(frame, "VS", margin + bar_h, font, 1.4 * s, (0, 215, 255), thick + 1)

        status = ctx.status
        mid_y = height // 2
        if status == MatchStatus.LOADING:
            self._center_text(frame, "Initializing AI Vision...", mid_y, font, 1.2 * s, (255, 255, 255), thick)
        elif status == MatchStatus.WAITING:
            self._center_text(frame, "Waiting for Players...", mid_y, font, 1.2 * s, (255, 200, 120), thick)
            self._center_text(frame, "Stand on opposite sides of the camera", mid_y + int(50 * s),
                              font, 0.8 * s, (200, 200, 200), thick)
        elif status == MatchStatus.GAMEOVER:
            overlay = frame.copy()
            cv2.rectangle(overlay, (0, 0), (width, height), (0, 0, 0), -1)
            cv2.addWeighted(overlay, 0.55, frame, 0.45, 0, frame)
            winner = ctx.winner()
            result = "DRAW!" if winner is None else f"PLAYER {winner} WINS!"
            self._center_text(frame, "GAME OVER", mid_y - int(60 * s), font, 2.0 * s, (0, 0, 255), thick + 2)
            self._center_text(frame, result, mid_y + int(20 * s), font, 1.3 * s, (255, 255, 255), thick)
            self._center_text(frame, "Press R for a rematch", mid_y + int(80 * s), font, 0.8 * s,
                              (200, 200, 200), thick)

        message = ctx.notifications.current(self.now)
        if message and status == MatchStatus.PLAYING:
            self._center_text(frame, message, mid_y, font, 1.8 * s, (0, 240, 255), thick + 2)

        line_h = int(32 * s) + 4
        for i, text in enumerate(CONTROLS):
            y = height - margin - (len(CONTROLS) - 1 - i) * line_h
            cv2.putText(frame, text, (margin, y), font, 0.6 * s, (200, 200, 200), thick)

        return frame
