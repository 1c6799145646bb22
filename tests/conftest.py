import random
import sys
from pathlib import Path

import pytest

# Add src to sys.path so we can import abacus_trainer
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from abacus_trainer.core.models import Example, Step  # noqa: E402


# Common test fixtures
@pytest.fixture
def rng():
    """Return a seeded random source."""
    return random.Random(1234)


@pytest.fixture
def build_example():
    """Return a helper that replays actions through a rule into an Example."""
    def _build(rule, actions):
        start = rule.generate_start_state()
        state = start
        steps = []
        for action in actions:
            new_state = rule.apply_action(state, action)
            steps.append(Step(action, state, new_state))
            state = new_state
        return Example(start=start, steps=tuple(steps), answer=state)
    return _build
