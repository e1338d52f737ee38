import numpy as np
import pytest

from breakout_policies.policy_paddle_tracker import policy


@pytest.mark.parametrize("ball_x,expected", [
    (700, [4, 0, 0]),
    (100, [3, 0, 0]),
    (400, [0, 0, 0]),
    (403, [0, 0, 0]),
])
def test_policy_follows_ball(env, ball_x, expected, place_ball):
    place_ball(env, ball_x, 300, 5, 5)
    assert policy(env) == expected


def test_policy_drives_env(env):
    for _ in range(300):
        action = policy(env)
        assert env.action_space.contains(np.array(action))
        env.step(action)
        assert 0 <= env.paddle_x <= env.config.width - env.config.paddle_width
        assert env.score >= 0
