# sequence_sync/model/sequence_data_model.py

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Residue:
    """
    Bir zincirdeki tek sekans pozisyonu. Salt okunur; residue'lar sekans
    sağlayıcısından gelir, seçim katmanı onlara sadece referans verir.
    """
    chain_id: str
    position: int   # 1-tabanlı
    code: str


@dataclass(frozen=True)
class Chain:
    id: str
    residues: Tuple[Residue, ...] = ()
    name: Optional[str] = None

    def __len__(self) -> int:
        return len(self.residues)

    @property
    def sequence(self) -> str:
        return "".join(r.code for r in self.residues)


@dataclass
class SequenceData:
    """
    SequenceData, bir sekans repository'sinin döndürdüğü yapı zincirleri
    ve residue'ları.

    (chain, position) ile residue araması ilk kullanımda cache'lenir;
    grid ve selection store alt sekansları ucuza sorabilir.
    """
    id: str
    name: str
    chains: List[Chain] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._index: Optional[Dict[Tuple[str, int], Residue]] = None

    # ------------------------------------------------------------------
    # Arama
    # ------------------------------------------------------------------

    @property
    def chain_ids(self) -> List[str]:
        return [c.id for c in self.chains]

    def chain(self, chain_id: str) -> Optional[Chain]:
        for chain in self.chains:
            if chain.id == chain_id:
                return chain
        return None

    def residue(self, chain_id: str, position: int) -> Optional[Residue]:
        if self._index is None:
            self._index = {
                (r.chain_id, r.position): r
                for chain in self.chains
                for r in chain.residues
            }
        return self._index.get((chain_id, position))

    def sequence_for(self, chain_id: str, start: int, end: int) -> str:
        """
        Zincirde start <= position <= end olan residue'ların tek harfli
        kodlarını döndürür. Bilinmeyen zincir için boş string.
        """
        chain = self.chain(chain_id)
        if chain is None:
            return ""
        return "".join(
            r.code for r in chain.residues if start <= r.position <= end
        )

    # ------------------------------------------------------------------
    # İstatistikler
    # ------------------------------------------------------------------

    def stats(self) -> Dict[str, Any]:
        lengths = [len(c) for c in self.chains]
        total = sum(lengths)
        return {
            "chain_count": len(self.chains),
            "total_residues": total,
            "average_chain_length": (total / len(lengths)) if lengths else 0.0,
            "longest_chain": max(lengths, default=0),
        }


def build_sequence_data(
    structure_id: str,
    chains: List[Tuple[str, str]],
    *,
    name: Optional[str] = None,
    chain_names: Optional[Dict[str, str]] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> SequenceData:
    """
    (chain_id, tek harfli sekans) çiftlerinden SequenceData üretir; residue'lar
    1'den numaralanır. Gap ('-') karakterleri sütununu korur ama residue
    üretmez, böylece pozisyonlar ham sekans string'iyle hizalı kalır.
    """
    chain_names = chain_names or {}
    built: List[Chain] = []
    for chain_id, sequence in chains:
        residues = tuple(
            Residue(chain_id=chain_id, position=i + 1, code=code)
            for i, code in enumerate(sequence.upper())
            if code != "-"
        )
        built.append(Chain(id=chain_id, residues=residues, name=chain_names.get(chain_id)))

    return SequenceData(
        id=structure_id,
        name=name or structure_id,
        chains=built,
        metadata=dict(metadata or {}),
    )
