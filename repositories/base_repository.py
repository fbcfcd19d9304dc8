"""
Abstract interface for sequence data repositories.

Repositories hand structure sequences (chains + residues) to the selection
core and the residue grid, keeping UI components decoupled from where the
sequences come from (local FASTA, RCSB, ...).
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from model.sequence_data_model import SequenceData


class SequenceFetchError(RuntimeError):
    """Raised when a repository cannot provide sequences for a structure."""

    def __init__(self, structure_id: str, reason: str):
        super().__init__(f"Failed to fetch sequence data for {structure_id}: {reason}")
        self.structure_id = structure_id
        self.reason = reason


class AbstractSequenceRepository(ABC):
    """Base class for all sequence repositories."""

    @abstractmethod
    def fetch_sequence(self, structure_id: str) -> SequenceData:
        """Return chains and residues for a structure or raise SequenceFetchError."""
