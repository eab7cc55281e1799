"""Tests for the Gymnasium adapter."""

import numpy as np
import pytest

from rlharness.core.config import Config
from rlharness.envs import GymEnvironment


@pytest.fixture
def pendulum():
    env = GymEnvironment("Pendulum-v1", seed=0)
    yield env
    env.close()


class TestGymEnvironment:
    """Test GymEnvironment with Pendulum-v1."""

    def test_metadata(self, pendulum):
        """Test bounds are taken from the wrapped spaces."""
        assert pendulum.observation_space_size == 3
        assert pendulum.action_space_size == 1
        assert pendulum.action_low == pytest.approx(-2.0)
        assert pendulum.action_high == pytest.approx(2.0)
        assert pendulum.observation_high.shape == (3,)
        assert pendulum.name == "Gym:Pendulum-v1"

    def test_reset_and_step(self, pendulum):
        """Test reset and step return flat float64 states."""
        state = pendulum.reset()
        assert state.shape == (3,)
        assert state.dtype == np.float64

        next_state, reward, done, info = pendulum.step(0.5)
        assert next_state.shape == (3,)
        assert isinstance(reward, float)
        assert done is False
        assert info == ""
        assert np.array_equal(pendulum.get_current_state(), next_state)

    def test_action_clipped(self, pendulum):
        """Test out-of-range actions are clipped before forwarding."""
        assert pendulum.clip_action(10.0) == pytest.approx(2.0)
        pendulum.reset()
        pendulum.step(10.0)
        assert pendulum.unwrapped.unwrapped.last_u == pytest.approx(2.0)

    def test_time_limit(self, pendulum):
        """Test Pendulum truncates after 200 steps with TimeLimit."""
        pendulum.reset()
        results = [pendulum.step(0.0) for _ in range(200)]
        assert not any(r.done for r in results[:-1])
        assert results[-1].done
        assert results[-1].info == "TimeLimit"

    def test_seeded_first_reset(self):
        """Test the seed fixes the first initial state."""
        first = GymEnvironment("Pendulum-v1", seed=3)
        second = GymEnvironment("Pendulum-v1", seed=3)
        try:
            assert np.array_equal(first.reset(), second.reset())
        finally:
            first.close()
            second.close()

    def test_discrete_action_space_rejected(self):
        """Test environments without a single continuous action are refused."""
        with pytest.raises(ValueError, match="single continuous action"):
            GymEnvironment("CartPole-v1")

    def test_close_idempotent(self, pendulum):
        pendulum.close()
        pendulum.close()
        with pytest.raises(RuntimeError):
            pendulum.reset()

    def test_from_config(self):
        """Test construction from config keys."""
        env = GymEnvironment.from_config(Config.create({"env_id": "Pendulum-v1", "max_episode_steps": 5}))
        try:
            env.reset()
            results = [env.step(0.0) for _ in range(5)]
            assert results[-1].done
            assert results[-1].info == "TimeLimit"
        finally:
            env.close()

    def test_set_render_mode(self, pendulum):
        """Test the runner-facing render switch toggles rendering."""
        assert pendulum.render_enabled is False
        pendulum.set_render_mode(True)
        assert pendulum.render_enabled is True
        pendulum.set_render_mode(False)
        pendulum.render()
