"""Seed resolution for reproducible task generation."""

from __future__ import annotations

import os
from typing import Optional

import numpy as np

from .env import parse_int_env


DEFAULT_SEED_ENV_VAR = "TASKGEN_SEED"


def get_generator_seed(env_var: str = DEFAULT_SEED_ENV_VAR) -> Optional[int]:
    """Return the configured generator seed, if available."""
    return parse_int_env(os.getenv(env_var), min_value=0, name=env_var)


def make_rng(seed: Optional[int] = None, env_var: str = DEFAULT_SEED_ENV_VAR) -> np.random.Generator:
    """Create the generator RNG from an explicit seed or the environment.

    Without either, the generator is seeded from OS entropy.
    """
    if seed is None:
        seed = get_generator_seed(env_var=env_var)
    return np.random.default_rng(seed)
