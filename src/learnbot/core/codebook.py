"""
Codebook: Deterministic token hypervectors and phrase encoding.

Maps tokens to reproducible random hypervectors using hash-seeded random
generation, so a model trained in one process classifies identically in
another without persisting the token vectors themselves.
"""

import hashlib
import re
from typing import Dict, List, Optional

import torch

from learnbot.core.operations import Operations
from learnbot.core.vector_space import VectorSpace

_TOKEN_PATTERN = re.compile(r"[^\w\s']")


def tokenize(text: str) -> List[str]:
    """Lowercase, drop punctuation except apostrophes, split on whitespace."""
    cleaned = _TOKEN_PATTERN.sub(" ", text.lower())
    return [t.strip("'") for t in cleaned.split() if t.strip("'")]


class Codebook:
    """
    Deterministic hypervector generation for tokens.

    The same token always maps to the same vector; different tokens map to
    nearly orthogonal vectors.

    Attributes:
        _space: The VectorSpace configuration
        _cache: Memoization cache for generated vectors

    Example:
        >>> codebook = Codebook(VectorSpace(dimensions=1000))
        >>> torch.equal(codebook.encode("hello"), codebook.encode("hello"))
        True
    """

    def __init__(self, space: VectorSpace):
        self._space = space
        self._cache: Dict[str, torch.Tensor] = {}

    @property
    def space(self) -> VectorSpace:
        return self._space

    def encode(self, token: str) -> torch.Tensor:
        """
        Hypervector for a single token.

        Uses: sha256(token) -> 32-bit seed -> unit random vector.
        """
        if token not in self._cache:
            self._cache[token] = self._space.random_vector(self._hash_to_seed(token))
        return self._cache[token]

    def encode_text(self, text: str) -> Optional[torch.Tensor]:
        """
        Phrase vector: normalized bundle of the phrase's token vectors.

        Returns:
            Unit vector, or None when the text has no tokens
        """
        tokens = tokenize(text)
        if not tokens:
            return None
        return Operations.bundle(*(self.encode(t) for t in tokens))

    def cache_size(self) -> int:
        return len(self._cache)

    @staticmethod
    def _hash_to_seed(token: str) -> int:
        digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
        return int(digest[:8], 16)

    def __repr__(self) -> str:
        return f"Codebook(dimensions={self._space.dimensions}, cached={self.cache_size()})"
