"""Base class for each step in the pupil dilation pipeline."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import pandas as pd

from ..config import EpochSpec, PipelineConfig, SessionMetadata


@dataclass(frozen=True)
class PipelineContext:
    """Inputs shared by all stages of one run."""

    config: PipelineConfig
    baseline: float
    epochs: EpochSpec
    session: SessionMetadata


class IPipelineStage(ABC):
    """Abstract processing stage.

    Each concrete implementation is one step of the pipeline and a pure
    function of its input table: the caller's DataFrame is never mutated.
    """

    name: str = "stage"

    @abstractmethod
    def process(self, table: pd.DataFrame, context: PipelineContext) -> pd.DataFrame:
        """Return the next table state."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
