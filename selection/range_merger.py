"""
Zincir bazında aralık birleştirme.

Selection store bunu ``multiple`` modundaki seçimleri ayrık tutmak için,
highlight bridge ise hover edilen pozisyonları renderer koordinatlarına
çevirmeden önce birkaç aralığa indirmek için kullanır.

Aralıklar ``start <= end`` olan ``(chain_id, start, end)`` tuple'larıdır
(1-tabanlı, kapalı aralık). Tek pozisyon, dejenere bir aralıktır.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

ChainRange = Tuple[str, int, int]


def merge_ranges(ranges: Iterable[ChainRange]) -> List[ChainRange]:
    """En küçük, sıralı, çakışmayan ve bitişik olmayan aralık listesini döndürür.

    Aralıklar tek geçişlik birleştirmeden önce zincire göre gruplanıp
    ``(start, end)`` ile sıralanır; sonuç girdi sırasına bağlı değildir.
    ``b.start <= a.end + 1`` olduğunda ``b`` aralığı ``a`` içine katılır
    (değen aralıklar da birleşir). Zincirler sıralı chain-id düzeninde çıkar.
    """
    by_chain: Dict[str, List[Tuple[int, int]]] = defaultdict(list)
    for chain_id, start, end in ranges:
        if start > end:
            start, end = end, start
        by_chain[chain_id].append((start, end))

    merged: List[ChainRange] = []
    for chain_id in sorted(by_chain):
        spans = sorted(by_chain[chain_id])
        acc_start, acc_end = spans[0]
        for start, end in spans[1:]:
            if start <= acc_end + 1:
                acc_end = max(acc_end, end)
            else:
                merged.append((chain_id, acc_start, acc_end))
                acc_start, acc_end = start, end
        merged.append((chain_id, acc_start, acc_end))
    return merged


def merge_positions(positions: Iterable[Tuple[str, int]]) -> List[ChainRange]:
    """Ayrık ``(chain_id, position)`` çiftlerini aralıklara indirger."""
    return merge_ranges((chain_id, pos, pos) for chain_id, pos in positions)

