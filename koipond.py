import logging
import random
import time
from typing import Optional, Tuple

import pygame

from pond.color import parse_color, parse_config_color
from pond.config.display import (
    DISPLAY_FRAME_RATE,
    RESIZE_DEBOUNCE_SECONDS,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    SEPARATOR_WIDTH,
    WINDOW_CAPTION,
)
from pond.config.store import ConfigStore
from pond.environment import PondEnvironment
from pond.frame_driver import FrameDriver
from pond.math_utils import Point
from rendering.pygame_renderer import PygameRenderBackend

logger = logging.getLogger(__name__)

WATER_OPACITY_STEPS = (0.0, 0.1, 0.3, 0.55)


class KoiPondSimulator:
    """Interactive koi pond in a pygame window.

    Attributes:
        config_store: Runtime configuration (themes and menu toggles)
        screen: Pygame display surface
        clock: Pygame clock for the display frame rate
        environment: The pond being shown
        driver: Fixed-timestep driver ticking the pond
        renderer: Pygame render backend drawing onto ``screen``
    """

    def __init__(
        self,
        width: int = SCREEN_WIDTH,
        height: int = SCREEN_HEIGHT,
        config_store: Optional[ConfigStore] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.size: Tuple[int, int] = (width, height)
        self.config_store = config_store or ConfigStore()
        self.rng = random.Random(seed)
        self.clock: pygame.time.Clock = pygame.time.Clock()
        self.screen: Optional[pygame.Surface] = None
        self.environment: Optional[PondEnvironment] = None
        self.driver: Optional[FrameDriver] = None
        self.renderer: Optional[PygameRenderBackend] = None
        self._pending_size: Optional[Tuple[int, int]] = None
        self._pending_size_time = 0.0

    def setup_game(self) -> None:
        """Open the window and populate the pond."""
        self.screen = pygame.display.set_mode(self.size, pygame.RESIZABLE)
        pygame.display.set_caption(WINDOW_CAPTION)

        background = parse_config_color(self.config_store.config.environment.background_color)
        self.renderer = PygameRenderBackend(self.screen, background)
        self.environment = PondEnvironment(
            *self.size, config_store=self.config_store, renderer=self.renderer, rng=self.rng
        )
        self.environment.initialize_objects()
        self.driver = FrameDriver(self.environment)
        self.driver.start()

    # -- menu toggles -------------------------------------------------------

    def next_theme(self) -> None:
        theme = self.config_store.cycle_theme()
        logger.info("Theme: %s", theme)

    def toggle_simplified_fish(self) -> None:
        current = self.config_store.config.fish.draw_simplified
        self.config_store.apply_overrides({"fish": {"draw_simplified": not current}})

    def toggle_leader_links(self) -> None:
        current = self.config_store.config.fish.draw_leader_follower_links
        self.config_store.apply_overrides({"fish": {"draw_leader_follower_links": not current}})

    def toggle_lanterns(self) -> None:
        enabled = not self.config_store.config.lantern.include
        self.environment.set_lanterns_enabled(enabled)
        logger.info("Lanterns %s", "on" if enabled else "off")

    def cycle_water_opacity(self) -> None:
        r, g, b, opacity = parse_color(self.config_store.config.environment.surface_color)
        later = [step for step in WATER_OPACITY_STEPS if step > opacity + 1e-6]
        next_opacity = later[0] if later else WATER_OPACITY_STEPS[0]
        self.config_store.apply_overrides({"environment": {"surface_color": f"rgba({r}, {g}, {b}, {next_opacity})"}})

    def toggle_pause(self) -> None:
        if self.driver.paused:
            self.driver.resume()
        else:
            self.driver.pause()

    # -- loop ---------------------------------------------------------------

    def handle_events(self) -> bool:
        """Handle user input and window events. Returns False to quit."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                x, y = event.pos
                self.environment.add_food(Point(x, self.screen.get_height() - y))
            elif event.type == pygame.VIDEORESIZE:
                self._pending_size = (event.w, event.h)
                self._pending_size_time = time.monotonic()
            elif event.type == pygame.WINDOWMINIMIZED:
                self.driver.pause()
            elif event.type == pygame.WINDOWRESTORED:
                if self.driver.paused:
                    self.driver.resume()
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_t:
                    self.next_theme()
                elif event.key == pygame.K_s:
                    self.toggle_simplified_fish()
                elif event.key == pygame.K_l:
                    self.toggle_leader_links()
                elif event.key == pygame.K_n:
                    self.toggle_lanterns()
                elif event.key == pygame.K_w:
                    self.cycle_water_opacity()
                elif event.key == pygame.K_SPACE:
                    self.toggle_pause()
                elif event.key == pygame.K_ESCAPE:
                    return False
        return True

    def apply_pending_resize(self) -> None:
        """Resize the pond once the window size has settled."""
        if self._pending_size is None:
            return
        if time.monotonic() - self._pending_size_time < RESIZE_DEBOUNCE_SECONDS:
            return
        width, height = self._pending_size
        self._pending_size = None
        if (width, height) == self.size or width <= 0 or height <= 0:
            return
        self.size = (width, height)
        self.screen = pygame.display.get_surface()
        self.renderer.set_surface(self.screen)
        self.environment.resize(width, height)

    def update(self) -> None:
        """Advance the pond by however many ticks are due."""
        self.apply_pending_resize()
        self.renderer.background_color = parse_config_color(self.environment.config.environment.background_color)
        self.driver.advance()

    def render(self) -> None:
        pygame.display.flip()

    def run(self) -> None:
        """Run the pond until the window is closed."""
        self.setup_game()

        logger.info("=" * SEPARATOR_WIDTH)
        logger.info("KOI POND")
        logger.info("=" * SEPARATOR_WIDTH)
        logger.info("Controls:")
        logger.info("  Click - Drop food")
        logger.info("  T     - Next theme (%s)", ", ".join(self.config_store.theme_names))
        logger.info("  S     - Toggle simplified fish")
        logger.info("  L     - Toggle leader/follower links")
        logger.info("  N     - Toggle lanterns")
        logger.info("  W     - Cycle water opacity")
        logger.info("  SPACE - Pause/Resume")
        logger.info("  ESC   - Quit")
        logger.info("=" * SEPARATOR_WIDTH)

        while self.handle_events():
            self.update()
            self.render()
            self.clock.tick(DISPLAY_FRAME_RATE)

        logger.info("Pond closed after %d ticks: %s", self.driver.tick_count, self.environment.object_counts())


def main(
    width: int = SCREEN_WIDTH,
    height: int = SCREEN_HEIGHT,
    config_store: Optional[ConfigStore] = None,
    seed: Optional[int] = None,
) -> None:
    """Entry point for the windowed pond."""
    pygame.init()
    game = KoiPondSimulator(width, height, config_store=config_store, seed=seed)
    try:
        game.run()
    finally:
        pygame.quit()


if __name__ == "__main__":
    main()
