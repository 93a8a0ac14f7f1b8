"""
VectorSpace: Configuration for the intent classifier's hypervector space.

Every token, phrase and intent prototype vector is created by the same
VectorSpace so they can be compared with cosine similarity.
"""

from dataclasses import dataclass

import torch

from learnbot.config.constants import DEFAULT_DIMENSIONS, MAX_DIMENSIONS, MIN_DIMENSIONS


@dataclass(frozen=True)
class VectorSpace:
    """
    Immutable hypervector space configuration (CPU-only).

    Attributes:
        dimensions: Number of dimensions per hypervector
        dtype: PyTorch data type for vectors (default: float32)

    Example:
        >>> space = VectorSpace(dimensions=1000)
        >>> space.random_vector(seed=7).shape
        torch.Size([1000])
    """

    dimensions: int = DEFAULT_DIMENSIONS
    dtype: torch.dtype = torch.float32

    def __post_init__(self) -> None:
        if self.dimensions < MIN_DIMENSIONS:
            raise ValueError(f"Dimensions must be >= {MIN_DIMENSIONS}, got {self.dimensions}")
        if self.dimensions > MAX_DIMENSIONS:
            raise ValueError(f"Dimensions must be <= {MAX_DIMENSIONS}, got {self.dimensions}")

    def random_vector(self, seed: int) -> torch.Tensor:
        """
        Deterministic random unit vector.

        Same seed always produces the same vector. Unit norm keeps token
        vectors on equal footing when they are summed into a phrase.

        Args:
            seed: Integer seed for the torch generator

        Returns:
            Tensor of shape (dimensions,) with norm 1.0
        """
        gen = torch.Generator().manual_seed(seed)
        vec = torch.randn(self.dimensions, dtype=self.dtype, generator=gen)
        return vec / torch.norm(vec)
