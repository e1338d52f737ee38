import os

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from breakout_games.brick_breaker import GameEnv


@pytest.fixture
def env():
    env = GameEnv()
    yield env
    env.close()


@pytest.fixture
def place_ball():
    def _place(env, x, y, vx, vy):
        env.ball_pos.update(x, y)
        env.ball_vel.update(vx, vy)
    return _place
