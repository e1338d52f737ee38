def policy(env):
    # Strategy: keep the paddle centre under the ball's x position. The dead zone of
    # half a paddle step stops the paddle from jittering once it is lined up.
    paddle_x, _, paddle_width, _ = env.render_state()["paddle"]
    ball_x = env.ball_pos.x
    dx = ball_x - (paddle_x + paddle_width / 2)
    dead_zone = env.config.paddle_step / 2

    if dx > dead_zone:
        return [4, 0, 0]  # Move right
    elif dx < -dead_zone:
        return [3, 0, 0]  # Move left
    else:
        return [0, 0, 0]  # No movement (already under the ball)
