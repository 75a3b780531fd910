# sidescroller/game/game.py
import sys, argparse, logging
import pygame
from pygame import K_LEFT, K_RIGHT, K_a, K_d, K_UP, K_SPACE, K_w, K_r, K_p, K_ESCAPE

from .config import WIDTH, HEIGHT, FPS
from .painter import Painter
from .world import Game, Key, FixedTicker, EDGE_KEYS

logger = logging.getLogger(__name__)

KEYMAP = {
    K_LEFT: Key.LEFT, K_a: Key.LEFT,
    K_RIGHT: Key.RIGHT, K_d: Key.RIGHT,
    K_UP: Key.JUMP, K_SPACE: Key.JUMP, K_w: Key.JUMP,
    K_r: Key.RESET,
    K_p: Key.PAUSE,
}


class PygameTicker:
    """Tick source backed by pygame's frame clock."""

    def __init__(self, fps: int = FPS):
        self.fps = fps
        self.clock = pygame.time.Clock()

    def wait(self) -> float:
        return float(self.clock.tick(self.fps))


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Side-scrolling platformer")
    p.add_argument("--fps", type=int, default=FPS, help="Frames per second")
    p.add_argument("--log-level", type=str, default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Logging verbosity (DEBUG shows per-tick events)")
    p.add_argument("--max-frames", type=int, default=None,
                   help="Stop after this many frames (useful with --headless)")
    p.add_argument("--headless", action="store_true",
                   help="Run the simulation without opening a window")
    return p.parse_args(argv)


class Keyboard:
    """
    Physical keys -> Game keys. Several physical keys share one Key (arrows
    and letters), so a Key is released only when none of its aliases is held,
    and a fresh alias still fires the edge action.
    """

    def __init__(self, game: Game, keymap=KEYMAP):
        self.game = game
        self.keymap = keymap
        self.held = set()

    def key_down(self, raw: int) -> None:
        key = self.keymap.get(raw)
        if key is None or raw in self.held:
            return
        alias_held = any(self.keymap[r] is key for r in self.held)
        self.held.add(raw)
        if alias_held and key in EDGE_KEYS:
            self.game.release(key)
        self.game.press(key)

    def key_up(self, raw: int) -> None:
        key = self.keymap.get(raw)
        if key is None:
            return
        self.held.discard(raw)
        if not any(self.keymap[r] is key for r in self.held):
            self.game.release(key)


def handle_events(game: Game, keyboard: Keyboard) -> None:
    """Translate pygame input into game key presses; stop the loop on quit."""
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            game.stop()
        elif event.type == pygame.KEYDOWN:
            if event.key == K_ESCAPE:
                game.stop()
            else:
                keyboard.key_down(event.key)
        elif event.type == pygame.KEYUP:
            keyboard.key_up(event.key)


def run(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    game = Game()

    if args.headless:
        frames = game.run(FixedTicker(args.fps), max_frames=args.max_frames or FPS * 10)
        logger.info("headless run: %d frames, state=%s score=%d",
                    frames, game.state.value, game.score)
        return 0

    pygame.init()
    pygame.display.set_caption("Side-scroller")
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    painter = Painter(WIDTH, HEIGHT)
    keyboard = Keyboard(game)

    def on_frame(g: Game) -> None:
        handle_events(g, keyboard)
        painter.draw(screen, g)
        pygame.display.flip()

    try:
        game.run(PygameTicker(args.fps), on_frame=on_frame, max_frames=args.max_frames)
    finally:
        pygame.quit()
    return 0


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
