"""
Serialization utilities for learnbot persistence.

- JsonSerializer: statement snapshots and model metadata
- IntentModelSerializer: intent prototype vectors (torch) + metadata (JSON)

Writes go through a temporary file and an atomic replace, so a crash
mid-write leaves the previous file intact.
"""

import json
import os
import pickle
import tempfile
from pathlib import Path
from typing import Any, Dict, Tuple

import torch


def _atomic_write(path: Path, write) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            write(f)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class JsonSerializer:
    """Simple JSON serializer for dictionaries and lists."""

    @staticmethod
    def save(obj: Any, path: Path) -> None:
        """Save object as JSON (atomic replace)."""
        payload = json.dumps(obj, indent=2, ensure_ascii=False).encode("utf-8")
        _atomic_write(Path(path), lambda f: f.write(payload))

    @staticmethod
    def load(path: Path) -> Any:
        """
        Load object from JSON.

        Raises:
            FileNotFoundError: If the file does not exist
            json.JSONDecodeError: If the file is not valid JSON
        """
        with open(Path(path), "r", encoding="utf-8") as f:
            return json.load(f)


class IntentModelSerializer:
    """
    Save/load intent prototypes.

    File layout:
    ```
    model_dir/
        intent_model.pt      # {intent: accumulated prototype tensor}
        intent_model.json    # dimensions, example counts
    ```
    """

    @staticmethod
    def save(
        prototypes: Dict[str, torch.Tensor],
        metadata: Dict[str, Any],
        model_dir: Path,
        name: str,
    ) -> None:
        model_dir = Path(model_dir)
        tensors = {intent: vec.detach().clone() for intent, vec in prototypes.items()}
        _atomic_write(model_dir / f"{name}.pt", lambda f: torch.save(tensors, f))
        JsonSerializer.save(metadata, model_dir / f"{name}.json")

    @staticmethod
    def load(model_dir: Path, name: str, dimensions: int) -> Tuple[Dict[str, torch.Tensor], Dict[str, Any]]:
        """
        Load prototypes and metadata.

        Raises:
            FileNotFoundError: If either file is missing
            ValueError: If the file is unreadable or dimensions or shapes don't match
        """
        model_dir = Path(model_dir)
        vector_file = model_dir / f"{name}.pt"
        metadata_file = model_dir / f"{name}.json"

        if not vector_file.exists():
            raise FileNotFoundError(f"Intent model not found: {vector_file}")
        if not metadata_file.exists():
            raise FileNotFoundError(f"Intent model metadata not found: {metadata_file}")

        metadata = JsonSerializer.load(metadata_file)
        saved_dimensions = metadata.get("dimensions") if isinstance(metadata, dict) else None
        if saved_dimensions != dimensions:
            raise ValueError(
                f"Saved model dimensions {saved_dimensions} != configured dimensions {dimensions}"
            )

        try:
            prototypes = torch.load(vector_file, weights_only=True)
        except (pickle.UnpicklingError, RuntimeError, EOFError) as exc:
            raise ValueError(f"Intent model {vector_file} is unreadable: {exc}") from exc
        if not isinstance(prototypes, dict):
            raise ValueError(f"Intent model {vector_file} is not a prototype mapping")
        for intent, vec in prototypes.items():
            if not isinstance(vec, torch.Tensor) or vec.shape != (dimensions,):
                raise ValueError(f"Prototype for {intent!r} has invalid shape")

        return prototypes, metadata
