from __future__ import annotations

from typing import Dict, Optional

import pygame

from falling_blocks.game import Action, GameController
from falling_blocks.game.events import EVENT_GAME_OVER
from falling_blocks.game.scheduler import FrameCallback
from .renderer import Renderer


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_UP: Action.ROTATE_CW,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_SPACE: Action.HARD_DROP,
}


class PygameFrameScheduler:
    """Frame scheduler backed by a pygame clock; call ``pump`` once per loop."""

    def __init__(self, fps: int = 60) -> None:
        self.fps = fps
        self.clock = pygame.time.Clock()
        self._callback: Optional[FrameCallback] = None

    def start(self, callback: FrameCallback) -> None:
        self._callback = callback
        self.clock.tick()  # drop the time spent before the first frame

    def stop(self) -> None:
        self._callback = None

    def pump(self) -> None:
        elapsed = self.clock.tick(self.fps)
        if self._callback is not None:
            self._callback(float(elapsed))


def run() -> None:
    pygame.init()
    try:
        game = GameController()
        renderer = Renderer()
        screen = pygame.display.set_mode(renderer.window_size(game.config.width, game.config.height))
        pygame.display.set_caption("Falling Blocks")
        font = pygame.font.SysFont(None, 28)

        game.events.subscribe(EVENT_GAME_OVER, lambda sender, **kw: print(f"Game over - score {kw['score']}"))
        frames = PygameFrameScheduler()
        game.attach(frames)
        game.start()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_p:
                        if not game.pause():
                            game.resume()
                    elif event.key == pygame.K_r:
                        game.start()
                    else:
                        action = KEY_TO_ACTION.get(event.key)
                        if action is not None:
                            game.submit(action)

            frames.pump()
            renderer.draw(screen, game.snapshot(), font)
        game.detach()
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
