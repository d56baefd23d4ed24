# game.py

class Game:
    def update(self, skeletons, frame_size, now):
        """Advance game state by one frame of detected skeletons."""
        pass

    def render(self, frame):
        """Render game visuals on the frame and return it."""
        pass

    def handle_key(self, key):
        """React to a key press from the window loop."""
        pass

    def reset(self):
        """Reset game state."""
        pass
