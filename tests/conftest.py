# tests/conftest.py
"""Shared test fixtures.

Fixtures build engines on a scripted StubTransport, so no test touches the
network. The ``blog`` fixture defines the model graph from
tests.fixtures.blog on a fresh engine.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

from __future__ import annotations

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from modelize.engine import Modelize
from modelize.testing import StubTransport, make_engine
from tests.fixtures.blog import Blog, define_blog

# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Engine fixtures
# =============================================================================


@pytest.fixture
def transport() -> StubTransport:
    return StubTransport()


@pytest.fixture
def engine(transport: StubTransport) -> Modelize:
    return make_engine(transport=transport)


@pytest.fixture
def blog(engine: Modelize) -> Blog:
    return define_blog(engine)
