"""
Factory for constructing repositories based on configuration.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from settings.config import AppConfig

from .base_repository import AbstractSequenceRepository
from .file_based_repository import FileBasedRepository
from .rcsb_repository import DEFAULT_TIMEOUT, RCSB_GRAPHQL_URL, RcsbRepository


class RepositoryFactory:
    """Instantiate repository implementations based on ``AppConfig`` settings."""

    def __init__(self, config: AppConfig):
        self.config = config

    def create_repository(self) -> AbstractSequenceRepository:
        source_type = self.config.data_source.type
        source_config: Dict[str, Any] = self.config.data_source.config

        if source_type == "file":
            fasta_path = source_config.get("fasta_path")
            if not fasta_path:
                raise ValueError("data_source.config.fasta_path is required for the 'file' source")
            return FileBasedRepository(fasta_path=Path(fasta_path).expanduser())
        if source_type == "rcsb":
            return RcsbRepository(
                url=source_config.get("url", RCSB_GRAPHQL_URL),
                timeout=float(source_config.get("timeout", DEFAULT_TIMEOUT)),
            )

        raise ValueError(f"Unsupported repository type '{source_type}'")
