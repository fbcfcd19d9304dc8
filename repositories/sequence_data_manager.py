"""
Caching front for a sequence repository.

Results are cached per upper-cased structure id. Failures are not cached and
not retried; they come back as an explicit :class:`SequenceFetchResult` error
so callers can show them without wrapping every call in ``try``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from model.sequence_data_model import SequenceData

from .base_repository import AbstractSequenceRepository, SequenceFetchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SequenceFetchResult:
    structure_id: str
    data: Optional[SequenceData] = None
    error: Optional[str] = None
    from_cache: bool = False

    @property
    def ok(self) -> bool:
        return self.data is not None and self.error is None


class SequenceDataManager:
    def __init__(self, repository: AbstractSequenceRepository):
        self.repository = repository
        self._cache: Dict[str, SequenceData] = {}

    def load(self, structure_id: str) -> SequenceFetchResult:
        key = structure_id.strip().upper()
        cached = self._cache.get(key)
        if cached is not None:
            return SequenceFetchResult(key, data=cached, from_cache=True)

        try:
            data = self.repository.fetch_sequence(key)
        except SequenceFetchError as exc:
            logger.warning("%s", exc)
            return SequenceFetchResult(key, error=str(exc))
        except FileNotFoundError as exc:
            return SequenceFetchResult(key, error=str(exc))

        self._cache[key] = data
        return SequenceFetchResult(key, data=data)

    def get_cached(self, structure_id: str) -> Optional[SequenceData]:
        return self._cache.get(structure_id.strip().upper())

    def clear_cache(self, structure_id: Optional[str] = None) -> None:
        if structure_id is None:
            self._cache.clear()
        else:
            self._cache.pop(structure_id.strip().upper(), None)

    def cached_ids(self) -> List[str]:
        return list(self._cache)
