"""Core HDC primitives."""

from learnbot.core.codebook import Codebook, tokenize
from learnbot.core.operations import Operations
from learnbot.core.vector_space import VectorSpace

__all__ = [
    "VectorSpace",
    "Codebook",
    "Operations",
    "tokenize",
]
