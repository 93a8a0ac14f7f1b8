"""
Operations: the two hyperdimensional operations the intent classifier needs.

- bundle: superimpose vectors (a phrase is the bundle of its tokens,
  an intent prototype is the bundle of its example phrases)
- cosine: similarity between a phrase and one or more prototypes
"""

from typing import List

import torch
import torchhd


class Operations:
    """
    Stateless torchhd wrappers returning plain torch tensors.

    torchhd promotes inputs to MAP tensors; results are converted back
    so they can be stacked, saved and compared like any other tensor.
    """

    @staticmethod
    def bundle(*vectors: torch.Tensor, normalize: bool = True) -> torch.Tensor:
        """
        Superimpose vectors.

        The bundle stays similar to every input, which is what makes a
        prototype resemble each of its examples.

        Args:
            *vectors: One or more hypervectors of equal shape
            normalize: Scale the result to unit norm (default True)

        Returns:
            Bundled vector

        Raises:
            ValueError: If no vectors are given
        """
        if not vectors:
            raise ValueError("Cannot bundle zero vectors")

        result = vectors[0]
        for vec in vectors[1:]:
            result = torchhd.bundle(result, vec)
        result = result.as_subclass(torch.Tensor)

        if normalize:
            norm = torch.norm(result)
            if norm > 1e-6:
                result = result / norm
        return result

    @staticmethod
    def cosine(query: torch.Tensor, memory: torch.Tensor) -> float:
        """Cosine similarity of two vectors, in [-1, 1]."""
        result = torchhd.cosine_similarity(query, memory)
        if isinstance(result, torch.Tensor):
            return float(result.reshape(-1)[0].item())
        return float(result)

    @staticmethod
    def cosine_batch(query: torch.Tensor, candidates: List[torch.Tensor]) -> List[float]:
        """
        Cosine similarity of one query against several candidates.

        Returns:
            Similarities in candidate order
        """
        if not candidates:
            return []
        stacked = torch.stack(candidates)
        result = torchhd.cosine_similarity(query, stacked)
        return [float(v) for v in result.as_subclass(torch.Tensor).reshape(-1)]
