"""
Shared fixtures for learnbot tests.

HDC components use small dimensions so tests stay fast.
"""

import pytest

from learnbot.config.settings import get_settings
from learnbot.core.codebook import Codebook
from learnbot.core.vector_space import VectorSpace


@pytest.fixture
def dimensions():
    """Standard test dimensions (smaller for faster tests)."""
    return 1000


@pytest.fixture
def vector_space(dimensions):
    """Create VectorSpace for tests."""
    return VectorSpace(dimensions=dimensions)


@pytest.fixture
def codebook(vector_space):
    """Create Codebook sharing the test VectorSpace."""
    return Codebook(vector_space)


@pytest.fixture
def settings(tmp_path, dimensions):
    """Settings rooted in a temporary data directory."""
    return get_settings(data_dir=tmp_path / "data", dimensions=dimensions)
