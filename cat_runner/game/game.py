# cat_runner/game/game.py
import sys, argparse, logging
import pygame
from pygame import K_SPACE, K_UP, K_ESCAPE, K_r
from .config import WIDTH, HEIGHT, FPS, TITLE, SCORES_FILE_DEFAULT
from .render import PygameRenderer
from .sim import Intent, Simulation
from .storage import JsonBestScoreStore

KEY_INTENTS = {
    K_SPACE: Intent.PRIMARY,
    K_UP: Intent.PRIMARY,
    K_r: Intent.RESTART,
}


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Cat Runner: jump over the obstacles.")
    p.add_argument("--seed", type=int, default=None,
                   help="Obstacle RNG seed. Omit for a random seed each launch.")
    p.add_argument("--scores-file", default=SCORES_FILE_DEFAULT,
                   help="JSON file holding the best score.")
    p.add_argument("--fps", type=int, default=FPS, help="Frame cap of the display loop.")
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args(argv)


def intent_for_event(event):
    """Map a pygame event to an Intent, or None."""
    if event.type == pygame.KEYDOWN:
        return KEY_INTENTS.get(event.key)
    if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
        # click anywhere = start/restart button
        return Intent.START
    return None


def run(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    pygame.init()
    pygame.display.set_caption(TITLE)
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    clock = pygame.time.Clock()

    renderer = PygameRenderer(screen)
    sim = Simulation(presenter=renderer,
                     store=JsonBestScoreStore(args.scores_file),
                     seed=args.seed)
    sim.render_idle()

    while True:
        clock.tick(args.fps)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN and event.key == K_ESCAPE:
                pygame.quit(); sys.exit()
            intent = intent_for_event(event)
            if intent is not None:
                sim.handle(intent)

        # Only ticks while running; after a collision the last frame stays up
        if sim.running:
            sim.tick(pygame.time.get_ticks())

        pygame.display.flip()


if __name__ == "__main__":
    run()
