# input_state.py

from dataclasses import dataclass
from constants import WIDTH, HEIGHT


@dataclass
class InputSample:
    """
    The latest pointer state, in scene units.

    The event loop writes position and the one-shot edge flags; the scene reads
    them once per tick and is the only code that sets or clears `held`.
    Edge flags are cleared by the frame driver at the end of every tick.
    """
    x: float = WIDTH / 2
    y: float = HEIGHT / 2
    held: bool = False
    just_pressed: bool = False
    just_released: bool = False

    def move(self, x: float, y: float):
        self.x = min(max(x, 0.0), float(WIDTH))
        self.y = min(max(y, 0.0), float(HEIGHT))

    def press(self, x: float, y: float):
        self.move(x, y)
        self.just_pressed = True

    def release(self, x: float, y: float):
        self.move(x, y)
        self.just_released = True

    def clear_edges(self):
        self.just_pressed = False
        self.just_released = False
