# sequence_sync/model/selection_types.py

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, Optional, Tuple


class SelectionMode(str, Enum):
    SINGLE = "single"
    RANGE = "range"
    MULTIPLE = "multiple"


class RegionAction(str, Enum):
    HIDE = "hide"
    ISOLATE = "isolate"
    HIGHLIGHT = "highlight"
    COPY = "copy"


def region_label(chain_id: str, start: int, end: int) -> str:
    if start == end:
        return f"{chain_id}:{start}"
    return f"{chain_id}:{start}-{end}"


@dataclass(frozen=True)
class Region:
    """
    Tek zincir üzerindeki kesintisiz seçili aralık (1-tabanlı, end dahil).

    Yerinde değiştirilmez; with_bounds() yeni id ve label ile yeni bir
    değer döndürür.
    """
    id: str
    chain_id: str
    start: int
    end: int
    sequence: str = ""
    label: str = ""

    @classmethod
    def create(
        cls,
        chain_id: str,
        start: int,
        end: int,
        sequence: str = "",
        *,
        region_id: Optional[str] = None,
    ) -> "Region":
        lo, hi = min(start, end), max(start, end)
        return cls(
            id=region_id or f"{chain_id}-{lo}-{hi}",
            chain_id=chain_id,
            start=lo,
            end=hi,
            sequence=sequence,
            label=region_label(chain_id, lo, hi),
        )

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def contains(self, chain_id: str, position: int) -> bool:
        return chain_id == self.chain_id and self.start <= position <= self.end

    def with_bounds(self, start: int, end: int, sequence: str = "") -> "Region":
        return replace(
            self,
            id=f"{self.chain_id}-{start}-{end}",
            start=start,
            end=end,
            sequence=sequence,
            label=region_label(self.chain_id, start, end),
        )


@dataclass(frozen=True)
class Constraints:
    """Önerilen her bölge ve seçim için kontrol edilen opsiyonel sınırlar."""
    max_selections: Optional[int] = None
    max_range_size: Optional[int] = None
    allowed_chains: Optional[FrozenSet[str]] = None

    def __post_init__(self) -> None:
        if self.allowed_chains is not None and not isinstance(self.allowed_chains, frozenset):
            object.__setattr__(self, "allowed_chains", frozenset(self.allowed_chains))


@dataclass(frozen=True)
class Selection:
    """Observer'lara verilen, store durumunun değişmez anlık görüntüsü."""
    regions: Tuple[Region, ...] = ()
    mode: SelectionMode = SelectionMode.RANGE
    constraints: Constraints = field(default_factory=Constraints)

    @property
    def is_empty(self) -> bool:
        return not self.regions

    @property
    def region_ids(self) -> Tuple[str, ...]:
        return tuple(r.id for r in self.regions)
