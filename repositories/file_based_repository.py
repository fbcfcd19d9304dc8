"""
File-backed repository implementation.

Reads chain sequences from a FASTA file with Biopython. Headers in the RCSB
download format (``>4HHB_1|Chains A, C|Hemoglobin alpha|Homo sapiens``) are
expanded into one chain per listed chain id; otherwise the record id is
split into structure and chain (``1CRN_A``, ``1CRN:A``) or taken as a bare
chain id belonging to the structure named after the file.
"""
from __future__ import annotations

import logging
import re
from collections import OrderedDict
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from Bio import SeqIO

from model.sequence_data_model import SequenceData, build_sequence_data

from .base_repository import AbstractSequenceRepository, SequenceFetchError

logger = logging.getLogger(__name__)

_RECORD_ID_RE = re.compile(r"^(?P<structure>[A-Za-z0-9]+)[_:](?P<chain>[A-Za-z0-9]+)$")
_AUTH_CHAIN_RE = re.compile(r"^(?P<label>\w+)\[auth (?P<auth>\w+)\]$")


class FastaChainRecord:
    def __init__(self, structure_id: str, chain_id: str, sequence: str, name: Optional[str] = None):
        self.structure_id = structure_id
        self.chain_id = chain_id
        self.sequence = sequence
        self.name = name


class FileBasedRepository(AbstractSequenceRepository):
    """Repository that loads chain sequences from a local FASTA file."""

    def __init__(self, fasta_path: Path):
        self.fasta_path = Path(fasta_path)
        self._cache: List[FastaChainRecord] = []
        self._load_records()

    def _load_records(self) -> None:
        if not self.fasta_path.exists():
            raise FileNotFoundError(f"FASTA path not found: {self.fasta_path}")

        default_structure = self.fasta_path.stem.upper()
        records: List[FastaChainRecord] = []
        for record in SeqIO.parse(str(self.fasta_path), "fasta"):
            sequence = str(record.seq).upper()
            for structure_id, chain_id, name in _parse_header(record.id, record.description, default_structure):
                records.append(FastaChainRecord(structure_id, chain_id, sequence, name))

        self._cache = records
        logger.debug("Loaded %d chain records from %s", len(records), self.fasta_path)

    def fetch_sequence(self, structure_id: str) -> SequenceData:
        wanted = structure_id.upper()
        matching = [r for r in self._cache if r.structure_id == wanted]
        if not matching:
            raise SequenceFetchError(structure_id, f"no chains in {self.fasta_path.name}")

        # First record wins when a chain id is listed twice
        chains: Dict[str, FastaChainRecord] = OrderedDict()
        for record in matching:
            chains.setdefault(record.chain_id, record)

        return build_sequence_data(
            wanted,
            [(chain_id, record.sequence) for chain_id, record in chains.items()],
            chain_names={c: r.name for c, r in chains.items() if r.name},
            metadata={"source": str(self.fasta_path)},
        )


def _parse_header(record_id: str, description: str, default_structure: str) -> List[Tuple[str, str, Optional[str]]]:
    parts = [p.strip() for p in description.split("|")]
    if len(parts) >= 2 and parts[1].startswith("Chain"):
        structure_id = parts[0].split("_")[0].upper()
        name = parts[2] if len(parts) > 2 and parts[2] else None
        chain_list = parts[1].split(" ", 1)[1] if " " in parts[1] else ""
        chains = []
        for token in chain_list.split(","):
            token = token.strip()
            if not token:
                continue
            auth_match = _AUTH_CHAIN_RE.match(token)
            chains.append((structure_id, auth_match.group("auth") if auth_match else token, name))
        return chains

    match = _RECORD_ID_RE.match(record_id)
    if match:
        return [(match.group("structure").upper(), match.group("chain"), None)]
    return [(default_structure, record_id, None)]
