from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RenderSettings:
    """Tunables of a render pass.

    samples_per_bounce and max_depth trade noise and truncation bias against
    cost; workers and chunk_size only change scheduling, never the image.
    """

    samples_per_bounce: int = 16
    max_depth: int = 5
    seed: int = 0
    workers: int | None = None # None lets the executor pick
    chunk_size: int = 256 # contiguous pixels per task

    def __post_init__(self) -> None:
        if self.samples_per_bounce < 1:
            raise ValueError(f"samples_per_bounce must be at least 1, got {self.samples_per_bounce}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.seed < 0:
            raise ValueError(f"seed must be non-negative, got {self.seed}")
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {self.chunk_size}")
