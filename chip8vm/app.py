# We're subclassing pyglet (that'll handle graphics, sound output, and keyboard handling)
# and overriding whatever def we need from there. The Chip8 engine itself knows
# nothing about pyglet: this window drives it at cpu_hz and ticks its timers at 60Hz.

import logging
import random

import numpy as np
import pyglet
from pyglet.window import key
from pyglet.media import synthesis

from .constants import WIDTH, HEIGHT, SCALE, CPU_HZ, TIMER_HZ
from .cpu import Chip8
from .errors import Chip8Error

logger = logging.getLogger(__name__)

#map binding keys
KEYMAP = {
    key._1: 0x1, key._2: 0x2, key._3: 0x3, key._4: 0xC,
    key.Q: 0x4, key.W: 0x5, key.E: 0x6, key.R: 0xD,
    key.A: 0x7, key.S: 0x8, key.D: 0x9, key.F: 0xE,
    key.Z: 0xA, key.X: 0x0, key.C: 0xB, key.V: 0xF,
}


class Chip8Window(pyglet.window.Window):

    def __init__(self, vm: Chip8, cpu_hz=CPU_HZ, scale=SCALE):
        self.vm = vm
        self.scale = scale
        self.window_width, self.window_height = WIDTH * scale, HEIGHT * scale
        super().__init__(
            width=self.window_width,
            height=self.window_height,
            caption="CHIP-8 Emulator",
            vsync=False
        )
        self.vm.should_draw = True
        self.sound_playing = False

        # Pre-allocated small framebuffer (64x32 RGBA), upscaled with numpy.repeat
        self._small_framebuf = np.zeros((HEIGHT, WIDTH, 4), dtype=np.uint8)
        self._small_framebuf[..., 3] = 255
        self.image = pyglet.image.ImageData(
            self.window_width,
            self.window_height,
            'RGBA',
            bytes(self.window_width * self.window_height * 4)
        )

        # Performance tracking counters
        self._fps_counter = 0
        self._cps_counter = 0
        self._bench_time = pyglet.clock.get_default().time()
        self.fps_label = self._hud_label("FPS: 0", 15)
        self.cps_label = self._hud_label("Cycles/s: 0", 30)

        # Schedule the loops
        pyglet.clock.schedule_interval(self._cpu_tick, 1 / cpu_hz)
        pyglet.clock.schedule_interval(self._timer_tick, 1 / TIMER_HZ)
        pyglet.clock.schedule(self.draw_frame)
        pyglet.clock.schedule_interval(self._update_bench, 1.0)

    def _hud_label(self, text, offset):
        return pyglet.text.Label(
            text,
            font_size=12,
            x=5,
            y=self.window_height - offset,
            anchor_x='left',
            anchor_y='center',
            color=(255, 255, 255, 255)
        )

    def _stop(self):
        pyglet.clock.unschedule(self._cpu_tick)
        pyglet.clock.unschedule(self._timer_tick)
        pyglet.clock.unschedule(self.draw_frame)
        pyglet.clock.unschedule(self._update_bench)
        self.close()

    # FPS / CPS
    def _update_bench(self, dt):
        now = pyglet.clock.get_default().time()
        elapsed = now - self._bench_time
        if elapsed >= 1.0:
            self.fps_label.text = f"FPS: {self._fps_counter / elapsed:.1f}"
            self.cps_label.text = f"Cycles/s: {self._cps_counter}"
            self._fps_counter = 0
            self._cps_counter = 0
            self._bench_time = now

    # ---- CPU cycle ----
    def _cpu_tick(self, dt):
        self._cps_counter += 1
        try:
            self.vm.step()
        except Chip8Error as e:
            logger.error("Emulation stopped: %s", e)
            self._stop()

    # ---- timers ----
    def _timer_tick(self, dt):
        self.vm.tick_timers()
        if self.vm.timers.sound_active:
            # Play beep only if it hasn't started yet
            if not self.sound_playing:
                self._play_beep()
        else:
            self.sound_playing = False

    # sound
    def _play_beep(self, duration=0.2, frequency=440, pitch_variation=15):
        freq = frequency + random.randint(-pitch_variation, pitch_variation)
        wave = synthesis.Sine(duration=duration, frequency=freq, sample_rate=44100)
        player = pyglet.media.Player()
        player.queue(wave)
        player.play()
        self.sound_playing = True

        def on_eos():
            self.sound_playing = False
            player.delete()

        player.on_eos = on_eos

    # draw loop
    def draw_frame(self, dt):
        if self.vm.should_draw:
            self.dispatch_event('on_draw')

    def on_draw(self):
        if not self.vm.should_draw:
            return
        self.clear()

        # pyglet's origin is bottom-left, so flip the rows
        pixels = np.flipud(self.vm.display_snapshot()) * 255
        self._small_framebuf[..., :3] = pixels[..., np.newaxis]
        if self.scale != 1:
            scaled = np.repeat(np.repeat(self._small_framebuf, self.scale, axis=0), self.scale, axis=1)
        else:
            scaled = self._small_framebuf

        #updates existing image without creating new object
        self.image.set_data('RGBA', self.window_width * 4, scaled.tobytes())
        self.image.blit(0, 0)

        self.fps_label.draw()
        self.cps_label.draw()

        self.vm.should_draw = False
        self._fps_counter += 1

    # keyboard
    def on_key_press(self, symbol, modifiers):
        if symbol == key.ESCAPE:
            self._stop()
        elif symbol == key.F1:
            root = logging.getLogger()
            root.setLevel(logging.INFO if root.level == logging.DEBUG else logging.DEBUG)
            logger.info("Debug logging: %s", root.level == logging.DEBUG)
        elif symbol in KEYMAP:
            self.vm.set_key_pressed(KEYMAP[symbol], True)

    def on_key_release(self, symbol, modifiers):
        if symbol in KEYMAP:
            self.vm.set_key_pressed(KEYMAP[symbol], False)


def run_window(vm, cpu_hz=CPU_HZ, scale=SCALE):
    Chip8Window(vm, cpu_hz=cpu_hz, scale=scale)
    pyglet.app.run()
