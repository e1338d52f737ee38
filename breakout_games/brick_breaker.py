import gymnasium as gym
from gymnasium.spaces import MultiDiscrete
import numpy as np
import pygame
import pygame.gfxdraw
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    """Arena geometry, brick layout, scoring and pacing for one game.

    Every dimension is in pixels, every speed in pixels per frame.
    """

    width: int = 800
    height: int = 600
    paddle_width: int = 100
    paddle_height: int = 10
    paddle_step: int = 10
    ball_radius: int = 10
    ball_speed: int = 5
    speed_increment: int = 1
    brick_width: int = 50
    brick_height: int = 20
    num_bricks: int = 30
    num_rows: int = 5
    brick_offset_y: int = 50
    brick_points: int = 10
    miss_penalty: int = 10
    max_steps: int = 10000

    def __post_init__(self):
        assert self.width > 0 and self.height > 0, "arena must have a positive size"
        assert 0 < self.paddle_width <= self.width, "paddle must fit inside the arena"
        assert self.paddle_height > 0 and self.paddle_step > 0
        assert self.ball_radius > 0 and self.ball_speed > 0
        assert self.speed_increment >= 0
        assert self.brick_width > 0 and self.brick_height > 0
        assert self.num_rows > 0 and self.num_bricks >= self.num_rows
        assert self.num_bricks % self.num_rows == 0, "bricks must split evenly into rows"
        assert self.brick_points >= 0 and self.miss_penalty >= 0
        assert self.max_steps > 0

    @property
    def bricks_per_row(self):
        return self.num_bricks // self.num_rows


def brick_intersects(rect, px, py, radius):
    # Ball centre against the brick rect grown by the radius on every side.
    return (
        px + radius > rect.x
        and px - radius < rect.x + rect.w
        and py + radius > rect.y
        and py - radius < rect.y + rect.h
    )


class GameEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"]}

    # Must be a short, user-facing control string:
    user_guide = "Controls: ← to move the paddle left, → to move it right."

    # Must be a short, user-facing description of the game:
    game_description = (
        "Classic brick breaker. Keep the ball in play with the paddle and smash every brick "
        "to reach the next, faster level. Losing the ball costs points."
    )

    # Should frames auto-advance or wait for user input?
    auto_advance = True

    # --- Constants ---
    # Colors
    COLOR_BG = (255, 255, 255)
    COLOR_PADDLE = (0, 0, 255)
    COLOR_BALL = (255, 0, 0)
    COLOR_UI_TEXT = (0, 0, 0)
    BRICK_COLORS = [
        (255, 0, 0),    # Red
        (255, 165, 0),  # Orange
        (255, 255, 0),  # Yellow
        (0, 128, 0),    # Green
        (0, 0, 255),    # Blue
    ]

    # Movement component of the action
    MOVE_LEFT = 3
    MOVE_RIGHT = 4

    def __init__(self, render_mode="rgb_array", config=None):
        super().__init__()

        self.config = config if config is not None else GameConfig()
        self.render_mode = render_mode
        self.SCREEN_WIDTH = self.config.width
        self.SCREEN_HEIGHT = self.config.height

        # Gymnasium spaces
        self.observation_space = gym.spaces.Box(
            low=0, high=255, shape=(self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3), dtype=np.uint8
        )
        self.action_space = MultiDiscrete([5, 2, 2])

        # Pygame setup
        pygame.init()
        pygame.font.init()
        self.screen = pygame.Surface((self.SCREEN_WIDTH, self.SCREEN_HEIGHT))
        self.font_ui = pygame.font.SysFont("monospace", 16, bold=True)

        # Game state variables (initialized in reset)
        self.paddle_x = None
        self.ball_pos = None
        self.ball_vel = None
        self.serve_speed = None
        self.bricks = None
        self.bricks_remaining = None
        self.score = None
        self.level = None
        self.steps = None

        self.reset()
        self.validate_implementation()

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)

        cfg = self.config
        self.paddle_x = cfg.width // 2 - cfg.paddle_width // 2
        self.serve_speed = cfg.ball_speed
        self._reset_ball(self.serve_speed)
        self._generate_bricks()

        self.score = 0
        self.level = 1
        self.steps = 0
        logger.debug("Game reset: %d bricks, serve speed %s", self.bricks_remaining, self.serve_speed)

        return self._get_observation(), self._get_info()

    def _generate_bricks(self):
        cfg = self.config
        self.bricks = []
        # The grid is centred on num_rows bricks, not on the column count.
        offset_x = (cfg.width - cfg.num_rows * cfg.brick_width) // 2
        offset_y = cfg.brick_offset_y

        for row in range(cfg.num_rows):
            color = self.BRICK_COLORS[row % len(self.BRICK_COLORS)]
            for col in range(cfg.bricks_per_row):
                x = offset_x + col * cfg.brick_width
                y = offset_y + row * cfg.brick_height
                rect = pygame.Rect(x, y, cfg.brick_width, cfg.brick_height)
                self.bricks.append({"rect": rect, "color": color, "row": row, "visible": True})

        self.bricks_remaining = len(self.bricks)

    def _reset_ball(self, speed):
        self.ball_pos = pygame.Vector2(self.config.width / 2, self.config.height / 2)
        self.ball_vel = pygame.Vector2(speed, speed)

    def step(self, action):
        score_before = self.score

        movement = action[0]
        if movement == self.MOVE_LEFT:
            self.handle_input("left")
        elif movement == self.MOVE_RIGHT:
            self.handle_input("right")

        self.advance_frame()
        self.steps += 1

        reward = self.score - score_before
        truncated = self.steps >= self.config.max_steps

        return (
            self._get_observation(),
            reward,
            False,  # the game never ends on its own
            truncated,
            self._get_info()
        )

    def handle_input(self, direction):
        assert direction in ("left", "right"), f"unknown direction: {direction!r}"
        cfg = self.config

        if direction == "left":
            self.paddle_x -= cfg.paddle_step
        else:
            self.paddle_x += cfg.paddle_step

        self.paddle_x = int(np.clip(self.paddle_x, 0, cfg.width - cfg.paddle_width))

    def advance_frame(self):
        cfg = self.config
        self.ball_pos += self.ball_vel

        # Side walls: reflect only, the ball may overshoot for a frame
        if self.ball_pos.x <= 0 or self.ball_pos.x >= cfg.width:
            self.ball_vel.x *= -1

        # Ceiling and paddle share one bounce test
        over_paddle = self.paddle_x <= self.ball_pos.x <= self.paddle_x + cfg.paddle_width
        near_floor = self.ball_pos.y >= cfg.height - cfg.paddle_height - cfg.ball_radius
        if self.ball_pos.y <= 0 or (near_floor and over_paddle):
            self.ball_vel.y *= -1

        # Ball lost
        if self.ball_pos.y > cfg.height:
            # A lost ball is always served at the initial speed
            self._reset_ball(cfg.ball_speed)
            self.score = max(0, self.score - cfg.miss_penalty)
            logger.debug("Ball lost, score now %d", self.score)

        # Brick collisions, every overlapping brick counts
        for brick in self.bricks:
            if brick["visible"] and brick_intersects(brick["rect"], self.ball_pos.x, self.ball_pos.y, cfg.ball_radius):
                brick["visible"] = False
                self.ball_vel.y *= -1
                self.score += cfg.brick_points
                self.bricks_remaining -= 1

        if self.bricks_remaining == 0:
            self.level += 1
            self._generate_bricks()
            self.serve_speed += cfg.speed_increment
            self._reset_ball(self.serve_speed)
            logger.info("Level %d reached, serve speed %s", self.level, self.serve_speed)

    def render_state(self):
        cfg = self.config
        return {
            "paddle": (self.paddle_x, cfg.height - cfg.paddle_height, cfg.paddle_width, cfg.paddle_height),
            "ball": (self.ball_pos.x, self.ball_pos.y, cfg.ball_radius),
            "bricks": [(tuple(b["rect"]), b["color"]) for b in self.bricks if b["visible"]],
            "score": self.score,
            "level": self.level,
        }

    def _get_observation(self):
        self.screen.fill(self.COLOR_BG)
        state = self.render_state()
        self._render_game(state)
        self._render_ui(state)
        arr = pygame.surfarray.array3d(self.screen)
        return np.transpose(arr, (1, 0, 2)).astype(np.uint8)

    def _render_game(self, state):
        # Bricks
        for rect, color in state["bricks"]:
            pygame.draw.rect(self.screen, color, rect)

        # Paddle
        pygame.draw.rect(self.screen, self.COLOR_PADDLE, state["paddle"])

        # Ball
        x, y, radius = state["ball"]
        pygame.gfxdraw.filled_circle(self.screen, int(x), int(y), radius, self.COLOR_BALL)
        pygame.gfxdraw.aacircle(self.screen, int(x), int(y), radius, self.COLOR_BALL)

    def _render_ui(self, state):
        hud_text = self.font_ui.render(f"Score: {state['score']}   Level: {state['level']}", True, self.COLOR_UI_TEXT)
        self.screen.blit(hud_text, (10, 20 - hud_text.get_height()))

    def _get_info(self):
        return {
            "score": self.score,
            "level": self.level,
            "steps": self.steps,
            "bricks_remaining": self.bricks_remaining,
        }

    def validate_implementation(self):
        # Test action space
        assert self.action_space.shape == (3,)
        assert self.action_space.nvec.tolist() == [5, 2, 2]

        # Test observation space
        test_obs = self._get_observation()
        assert test_obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert test_obs.dtype == np.uint8

        # Test reset
        obs, info = self.reset()
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(info, dict)

        # Test step
        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(reward, (int, float))
        assert term is False
        assert isinstance(trunc, bool)
        assert isinstance(info, dict)

        # Leave a fresh game behind
        self.reset()
        logger.debug("Implementation validated successfully")

    def close(self):
        pygame.quit()


def play_frame(env, movement):
    obs, reward, terminated, truncated, info = env.step([movement, 0, 0])

    # Human play has no step cap, only a real game end restarts
    if terminated:
        print(f"Game Over! Final Score: {info['score']}, Level: {info['level']}")
        obs, info = env.reset()

    return obs


def main():
    logging.basicConfig(level=logging.INFO)
    env = GameEnv(render_mode="rgb_array")

    # --- Human Playable Demo ---
    try:
        screen = pygame.display.set_mode((env.SCREEN_WIDTH, env.SCREEN_HEIGHT))
        pygame.display.set_caption("Brick Breaker Game")
        clock = pygame.time.Clock()

        obs, info = env.reset()
        done = False

        print("\n" + "=" * 30)
        print(f"GAME: {env.game_description}")
        print(f"CONTROLS: {env.user_guide}")
        print("=" * 30 + "\n")

        while not done:
            movement = 0  # no-op

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    done = True

            keys = pygame.key.get_pressed()
            if keys[pygame.K_LEFT]:
                movement = GameEnv.MOVE_LEFT
            elif keys[pygame.K_RIGHT]:
                movement = GameEnv.MOVE_RIGHT

            if keys[pygame.K_ESCAPE]:
                done = True

            obs = play_frame(env, movement)

            # Draw the observation from the environment to the display screen
            surf = pygame.surfarray.make_surface(np.transpose(obs, (1, 0, 2)))
            screen.blit(surf, (0, 0))

            pygame.display.flip()
            clock.tick(60)

    except pygame.error as e:
        print(f"An error occurred during the human-playable demo: {e}")
        print("This might be expected if running in a headless environment.")
    finally:
        env.close()


if __name__ == "__main__":
    main()
