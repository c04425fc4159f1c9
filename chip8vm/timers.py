from .constants import TIMER_HZ


class Timers:
    """Delay and sound timers.

    Both are decremented by an outside driver at TIMER_HZ, never by
    instruction execution.
    """

    rate = TIMER_HZ

    def __init__(self):
        self.delay = 0
        self.sound = 0

    def reset(self):
        self.delay = 0
        self.sound = 0

    def tick_delay(self):
        if self.delay > 0:
            self.delay -= 1

    def tick_sound(self):
        if self.sound > 0:
            self.sound -= 1

    def tick(self):
        self.tick_delay()
        self.tick_sound()

    @property
    def sound_active(self):
        return self.sound > 0
