# renderer.py

import math
import logging
import numpy as np
import pygame
import constants
from constants import WIDTH, HEIGHT, RIM_Y, FG, FG2
from terrain import x_left, x_right, floor_y, clamp
from scene import Phase

logger = logging.getLogger("canyon_stream")


def _alpha(color, opacity: float):
    """RGB(A) color with its alpha scaled by opacity (0-1)."""
    base = color[3] if len(color) == 4 else 255
    return (color[0], color[1], color[2], int(base * clamp(float(opacity), 0.0, 1.0)))


class SceneRenderer:
    """
    Draws one frame of the scene at the internal resolution (WIDTH x HEIGHT).

    Static geometry (sky gradient, sun, canyon walls and floor) is built once;
    everything else is drawn per frame from the scene's state. Translucent
    elements are drawn onto a scratch SRCALPHA layer which is then blitted
    over the frame.

    Data Contract:
    - Inputs: A pygame Surface of size (WIDTH, HEIGHT) and a Scene.
    - Outputs: None. The surface is overwritten.
    - Side Effects: Initializes pygame.font if needed.
    """
    def __init__(self):
        if not pygame.font.get_init():
            pygame.font.init()
        self.background = self._build_background()
        self.canyon = self._build_canyon()
        self.layer = pygame.Surface((WIDTH, HEIGHT), pygame.SRCALPHA)

        self.title_font = pygame.font.Font(None, 26)
        self.small_font = pygame.font.Font(None, 14)
        self.outro_font = pygame.font.Font(None, 30)
        logger.info("Renderer initialized.")

    def _build_background(self) -> pygame.Surface:
        """Sunset gradient with a soft light shaft, plus the parked sun."""
        stops = [0.0, constants.SKY_MID_STOP, 1.0]
        ts = np.linspace(0.0, 1.0, HEIGHT)
        column = np.stack([
            np.interp(ts, stops, [constants.SKY_TOP[c], constants.SKY_MID[c], constants.SKY_BOTTOM[c]])
            for c in range(3)
        ], axis=1)
        pixels = np.broadcast_to(column[np.newaxis, :, :], (WIDTH, HEIGHT, 3)).astype(float)

        # Light shaft: brighten toward white around a point slightly left of center.
        xs, ys = np.meshgrid(np.arange(WIDTH), np.arange(HEIGHT), indexing='ij')
        radius = max(WIDTH, HEIGHT) * 0.85
        dist = np.hypot(xs - WIDTH * 0.45, ys - HEIGHT * 0.45) / radius
        shaft = np.interp(dist, [0.0, 0.6, 1.0], [0.12, 0.05, 0.0])
        pixels += (255.0 - pixels) * shaft[:, :, np.newaxis]

        surface = pygame.surfarray.make_surface(np.clip(pixels, 0, 255).astype(np.uint8))

        # Sun parked at the bottom right; only its upper half peeks out.
        sun = pygame.Surface((WIDTH, HEIGHT), pygame.SRCALPHA)
        center = (int(WIDTH * 0.82), HEIGHT - 20)
        pygame.draw.circle(sun, _alpha(constants.SUN, 0.25), center, 34)
        pygame.draw.circle(sun, constants.SUN, center, 24)
        surface.blit(sun, (0, 0))
        return surface

    def _build_canyon(self) -> pygame.Surface:
        """Walls and floor traced from the terrain curves."""
        canyon = pygame.Surface((WIDTH, HEIGHT), pygame.SRCALPHA)
        rim_edge = float(x_left(float(RIM_Y)))

        # A single-unit rim line for the actor to stand on.
        pygame.draw.rect(canyon, FG, pygame.Rect(0, RIM_Y - 1, int(rim_edge), 1))

        depths = range(RIM_Y, HEIGHT + 3, 2)
        left = [(0, RIM_Y), (rim_edge, RIM_Y)]
        left += [(float(x_left(float(y))), y) for y in depths]
        left.append((0, HEIGHT + 2))
        pygame.draw.polygon(canyon, FG2, left)

        right = [(WIDTH, RIM_Y), (float(x_right(float(RIM_Y))), RIM_Y)]
        right += [(float(x_right(float(y))), y) for y in depths]
        right.append((WIDTH, HEIGHT + 2))
        pygame.draw.polygon(canyon, FG2, right)

        floor = [(x, float(floor_y(float(x)))) for x in range(0, WIDTH + 1, 4)]
        floor += [(WIDTH, HEIGHT + 2), (0, HEIGHT + 2)]
        pygame.draw.polygon(canyon, FG, floor)
        return canyon

    def draw(self, surface: pygame.Surface, scene):
        surface.blit(self.background, (0, 0))

        layer = self.layer
        layer.fill((0, 0, 0, 0))
        self._draw_haze(layer, scene.ambient.bg_t)
        surface.blit(layer, (0, 0))
        surface.blit(self.canyon, (0, 0))

        layer.fill((0, 0, 0, 0))
        self._draw_ripples(layer, scene.particles.ripples)
        self._draw_drops(layer, scene.particles.drops, scene.run.t)
        self._draw_splashes(layer, scene.particles.splashes)
        self._draw_actor(layer, scene.actor, scene.pose)
        surface.blit(layer, (0, 0))

        if scene.phase in (Phase.START, Phase.START_IN, Phase.START_FADING):
            self._draw_overlay(surface, scene.overlay_opacity)
        elif scene.phase is Phase.DONE:
            self._draw_outro(surface, scene)
        elif not scene.run.has_fired:
            self._draw_hint(surface)

    def _draw_haze(self, layer, t):
        """Haze bands sliding with ambient time, tiled so they never pop on wrap."""
        period = WIDTH + 140
        for i in range(4):
            speed = 4.5 if i % 2 else -3.8
            x = (i * 90 + t * speed) % period - 70
            y = HEIGHT * 0.44 + i * 14 + math.sin(t * 0.28 + i * 1.7) * 2.2
            for k in (-1, 0, 1):
                pygame.draw.rect(layer, constants.HAZE, pygame.Rect(int(x + k * period), int(y), 120, 7))

    def _draw_ripples(self, layer, ripples):
        steps = 16
        for (x, y), r, age, ttl in zip(ripples.positions, ripples.radii, ripples.ages, ripples.ttls):
            color = _alpha(FG2, 0.22 * (1.0 - age / ttl))
            for i in range(steps):
                ang = i / steps * math.pi * 2
                px = int(x + math.cos(ang) * r)
                py = int(y + math.sin(ang) * r * 0.35)
                layer.fill(color, pygame.Rect(px, py, 1, 1))

    def _draw_drops(self, layer, drops, t):
        trail_frame = int(t * 60) % 3 == 0
        for (x, y), (vx, vy), r, age, ttl in zip(drops.positions, drops.velocities, drops.radii,
                                                drops.ages, drops.ttls):
            speed = math.hypot(vx, vy)
            # Stretch with speed so the stream reads as liquid.
            w = max(1, int(r * (1.05 + speed * 0.22)))
            h = max(1, int(r * (1.10 + speed * 0.55)))
            fade = 1.0 - age / ttl
            layer.fill(_alpha(FG, 0.88 * fade), pygame.Rect(int(x) - w // 2, int(y) - h // 2, w, h))
            if speed > 2.2 and trail_frame:
                layer.fill(_alpha(FG2, 0.18 * fade), pygame.Rect(int(x - vx * 2), int(y - vy * 2), 1, 1))

    def _draw_splashes(self, layer, splashes):
        for (x, y), age, ttl, weight, size in zip(splashes.positions, splashes.ages, splashes.ttls,
                                                  splashes.weights, splashes.sizes):
            base = FG2 if weight else FG
            s = max(1, int(size))
            layer.fill(_alpha(base, 1.0 - age / ttl), pygame.Rect(int(x), int(y), s, s))

    def _draw_actor(self, layer, actor, pose):
        x = int(actor.x + pose.lean_x)
        y = int(actor.y)
        # Head (bobs), body column, two legs. Roughly 20 units tall.
        layer.fill(FG2, pygame.Rect(x - 2, int(round(y - 20 + pose.head_bob)), 5, 5))
        layer.fill(FG2, pygame.Rect(x - 2, y - 14, 5, 10))
        layer.fill(FG2, pygame.Rect(x - 2, y - 4, 2, 4))
        layer.fill(FG2, pygame.Rect(x + 1, y - 4, 2, 4))

    def _draw_overlay(self, surface, opacity):
        if opacity <= 0.0:
            return
        pw, ph = 170, 78
        panel = pygame.Surface((pw, ph), pygame.SRCALPHA)
        panel.fill(constants.PANEL_FILL)
        pygame.draw.rect(panel, constants.PANEL_EDGE, panel.get_rect(), 1)

        self._blit_centered(panel, self.title_font, constants.OVERLAY_TITLE, FG, 14)
        self._blit_centered(panel, self.small_font, constants.OVERLAY_SUBTITLE, FG2[:3], 48)

        panel.set_alpha(int(255 * clamp(float(opacity), 0.0, 1.0)))
        surface.blit(panel, ((WIDTH - pw) // 2, int(HEIGHT * 0.18)))

    def _blit_centered(self, panel, font, text, color, top):
        shadow = font.render(text, True, constants.TEXT_SHADOW[:3])
        shadow.set_alpha(constants.TEXT_SHADOW[3])
        main = font.render(text, True, color)
        x = (panel.get_width() - main.get_width()) // 2
        panel.blit(shadow, (x, top + 1))
        panel.blit(main, (x, top))

    def _draw_hint(self, surface):
        text = self.small_font.render(constants.HINT_TEXT, True, FG)
        surface.blit(text, ((WIDTH - text.get_width()) // 2, HEIGHT - 30))

    def _draw_outro(self, surface, scene):
        envelope = scene.outro_envelope()
        if envelope.alpha <= 0.0:
            return
        actor = scene.actor
        x = clamp(actor.x + 10.0, 8.0, WIDTH - 120.0)
        base_y = clamp(actor.y - 64.0, 16.0, HEIGHT - 40.0)
        # Exhale: drift upward with a tiny float.
        y = base_y - envelope.drift * 12 + math.sin(scene.run.t * 1.1) * 0.8

        glow = self.outro_font.render(constants.OUTRO_TEXT, True, constants.OUTRO_GLOW[:3])
        main = self.outro_font.render(constants.OUTRO_TEXT, True, FG)
        if envelope.scale != 1.0:
            glow = pygame.transform.rotozoom(glow, 0, envelope.scale)
            main = pygame.transform.rotozoom(main, 0, envelope.scale)

        # The afterglow lingers a little longer than the text itself.
        glow.set_alpha(int(255 * min(1.0, envelope.alpha + 0.18) * 0.28 * constants.OUTRO_GLOW[3] / 255))
        main.set_alpha(int(255 * 0.9 * envelope.alpha))
        surface.blit(glow, (int(x) + 3, int(y) + 3))
        surface.blit(main, (int(x), int(y)))
