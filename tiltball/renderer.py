import logging
import os
import time
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

import tiltball as P
from tiltball.engine import TiltBallEngine
from tiltball.tilt import GyroTiltSensor, KeyboardGyroscope

os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'
import pygame

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]


@dataclass
class AppearanceConfig:
    """Colors and labels — affect pixels, never physics."""
    window_color: Color = P.WINDOW_COLOR
    arena_color: Color = P.ARENA_COLOR
    obstacle_color: Color = P.OBSTACLE_COLOR
    ball_color: Color = P.BALL_COLOR
    title: str = P.TITLE_TEXT
    title_color: Color = P.TITLE_COLOR
    subtitle: str = P.SUBTITLE_TEXT
    subtitle_color: Color = P.SUBTITLE_COLOR
    label_padding: int = P.LABEL_PADDING
    show_labels: bool = True
    fps: int = P.FPS


class Renderer:
    """Maps engine state → pixels. Arena coordinates are pixels."""

    def __init__(self, config: Optional[AppearanceConfig] = None):
        self.config = config or AppearanceConfig()
        self._fonts = None
        self._display_initialized = False

    def _get_fonts(self):
        if self._fonts is None:
            pygame.font.init()
            title = pygame.font.Font(None, 34)
            title.set_bold(True)
            subtitle = pygame.font.Font(None, 26)
            self._fonts = (title, subtitle)
        return self._fonts

    def draw(self, surface: pygame.Surface, engine: TiltBallEngine):
        cfg = self.config
        surface.fill(cfg.window_color)

        if engine.bounds is not None:
            w, h = engine.bounds
            pygame.draw.rect(surface, cfg.arena_color,
                             pygame.Rect(0, 0, int(w), int(h)))

        for rect in engine.obstacles:
            pygame.draw.rect(surface, cfg.obstacle_color,
                             pygame.Rect(round(rect.left), round(rect.top),
                                         round(rect.width), round(rect.height)))

        ball = engine.ball
        pygame.draw.circle(surface, cfg.ball_color,
                           (round(ball.x), round(ball.y)), round(ball.radius))

        if cfg.show_labels:
            self._draw_labels(surface)

    def _draw_labels(self, surface: pygame.Surface):
        cfg = self.config
        title_font, subtitle_font = self._get_fonts()
        center_x = surface.get_width() // 2
        top = cfg.label_padding
        for text, font, color in ((cfg.title, title_font, cfg.title_color),
                                  (cfg.subtitle, subtitle_font, cfg.subtitle_color)):
            label = font.render(text, True, color)
            surface.blit(label, label.get_rect(midtop=(center_x, top)))
            top += label.get_height() + 4

    def render(self, engine: TiltBallEngine) -> np.ndarray:
        """Render single frame → (H, W, 3) uint8."""
        if engine.bounds is not None:
            w, h = engine.bounds
        else:
            w, h = engine.config.width, engine.config.height
        surface = pygame.Surface((int(w), int(h)))
        self.draw(surface, engine)
        return pygame.surfarray.array3d(surface).transpose(1, 0, 2)

    def play(self, engine: TiltBallEngine,
             gyroscope: Optional[KeyboardGyroscope] = None,
             size: Optional[Tuple[int, int]] = None):
        """Run the game in a resizable pygame window. Press Q to exit."""
        if not self._display_initialized:
            pygame.init()
            self._display_initialized = True

        gyroscope = gyroscope or KeyboardGyroscope()
        size = size or (int(engine.config.width), int(engine.config.height))
        screen = pygame.display.set_mode(size, pygame.RESIZABLE)
        pygame.display.set_caption('Tilt Ball')
        clock = pygame.time.Clock()
        engine.resize(*screen.get_size())

        try:
            with GyroTiltSensor(gyroscope, engine.tilt.set):
                running = True
                while running:
                    for event in pygame.event.get():
                        if event.type == pygame.QUIT:
                            running = False
                        elif event.type == pygame.KEYDOWN and event.key in (pygame.K_q, pygame.K_ESCAPE):
                            running = False
                        elif event.type == pygame.VIDEORESIZE:
                            screen = pygame.display.get_surface()
                            engine.resize(event.w, event.h)

                    gyroscope.poll(pygame.key.get_pressed())
                    engine.tick(time.perf_counter_ns())

                    self.draw(screen, engine)
                    pygame.display.flip()
                    clock.tick(self.config.fps)
        finally:
            pygame.quit()
            self._display_initialized = False
            self._fonts = None
        logger.debug("game window closed after %d frames", engine.frame)
