"""
Seçimin serileştirilebilir dışa aktarımı.

Seçim katmanı kendisi hiçbir şey saklamaz. Seçimi kaydetmek veya göndermek
isteyen host uygulamalar, JSON'a dönüşüp geri okunabilen bir pydantic model
üreten :func:`export_selection` ile, geri :class:`model.selection_types.Region`
değerlerine çevirmek için :func:`regions_from_export` ile çalışır.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .selection_types import Region, Selection


class ExportedRegion(BaseModel):
    id: str
    chain_id: str
    start: int = Field(ge=1)
    end: int = Field(ge=1)
    sequence: str = ""
    label: str = ""

    @field_validator("end")
    @classmethod
    def validate_end(cls, value: int, info) -> int:
        start = info.data.get("start")
        if start is not None and value < start:
            raise ValueError(f"end ({value}) must not be smaller than start ({start})")
        return value


class SelectionExport(BaseModel):
    """API'ye gönderilmeye hazır seçim verisi."""

    sequence_id: str
    regions: List[ExportedRegion] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Dict[str, Any] = Field(default_factory=dict)


def export_selection(
    selection: Selection,
    sequence_id: str,
    metadata: Optional[Dict[str, Any]] = None,
) -> SelectionExport:
    return SelectionExport(
        sequence_id=sequence_id,
        regions=[
            ExportedRegion(
                id=r.id,
                chain_id=r.chain_id,
                start=r.start,
                end=r.end,
                sequence=r.sequence,
                label=r.label,
            )
            for r in selection.regions
        ],
        metadata=dict(metadata or {}),
    )


def regions_from_export(payload: SelectionExport) -> List[Region]:
    return [
        Region(
            id=r.id,
            chain_id=r.chain_id,
            start=r.start,
            end=r.end,
            sequence=r.sequence,
            label=r.label,
        )
        for r in payload.regions
    ]
