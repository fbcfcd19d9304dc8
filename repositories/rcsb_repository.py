"""
RCSB PDB repository.

Fetches entity sequences from the RCSB data GraphQL endpoint and expands
every polypeptide entity into one chain per author chain id. Residue
positions are 1-based indices into the entity sequence; gap and unknown
('X') residues are skipped but keep their position.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from model.sequence_data_model import Chain, Residue, SequenceData

from .base_repository import AbstractSequenceRepository, SequenceFetchError

logger = logging.getLogger(__name__)

RCSB_GRAPHQL_URL = "https://data.rcsb.org/graphql"
DEFAULT_TIMEOUT = 20

ENTRY_QUERY = """
query GetPDBData($entryId: String!) {
  entry(entry_id: $entryId) {
    rcsb_id
    struct { title }
    exptl { method }
    refine { ls_d_res_high }
    polymer_entities {
      entity_poly { pdbx_seq_one_letter_code_can type }
      rcsb_entity_source_organism { ncbi_scientific_name }
      rcsb_polymer_entity { pdbx_description }
      rcsb_polymer_entity_container_identifiers { auth_asym_ids entity_id }
    }
  }
}
"""


class RcsbRepository(AbstractSequenceRepository):
    """Repository backed by the RCSB GraphQL API."""

    def __init__(
        self,
        url: str = RCSB_GRAPHQL_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def fetch_sequence(self, structure_id: str) -> SequenceData:
        entry_id = structure_id.strip().upper()
        if not entry_id:
            raise SequenceFetchError(structure_id, "empty structure id")

        try:
            response = self.session.post(
                self.url,
                json={"query": ENTRY_QUERY, "variables": {"entryId": entry_id}},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            logger.warning("RCSB request for %s failed: %s", entry_id, exc)
            raise SequenceFetchError(entry_id, str(exc)) from exc
        except ValueError as exc:
            raise SequenceFetchError(entry_id, "invalid JSON response") from exc

        errors = payload.get("errors")
        if errors:
            messages = ", ".join(str(e.get("message", e)) for e in errors)
            raise SequenceFetchError(entry_id, f"GraphQL errors: {messages}")

        entry = (payload.get("data") or {}).get("entry")
        if not entry:
            raise SequenceFetchError(entry_id, f"no data found for PDB ID {entry_id}")

        data = convert_entry(entry)
        if not data.chains:
            raise SequenceFetchError(entry_id, "entry has no polypeptide chains")
        return data


def convert_entry(entry: Mapping[str, Any]) -> SequenceData:
    """Convert an RCSB `entry` GraphQL object into SequenceData."""
    chains: List[Chain] = []
    organisms: List[str] = []

    for entity in entry.get("polymer_entities") or []:
        poly = entity.get("entity_poly") or {}
        if poly.get("type") != "polypeptide(L)":
            continue
        sequence = (poly.get("pdbx_seq_one_letter_code_can") or "").replace("\n", "").upper()
        if not sequence:
            continue

        identifiers = entity.get("rcsb_polymer_entity_container_identifiers") or {}
        description = (entity.get("rcsb_polymer_entity") or {}).get("pdbx_description") \
            or f"Entity {identifiers.get('entity_id', '?')}"
        for source in entity.get("rcsb_entity_source_organism") or []:
            name = source.get("ncbi_scientific_name")
            if name and name not in organisms:
                organisms.append(name)

        for chain_id in identifiers.get("auth_asym_ids") or []:
            residues = tuple(
                Residue(chain_id=chain_id, position=i + 1, code=code)
                for i, code in enumerate(sequence)
                if code not in ("-", "X")
            )
            chains.append(Chain(id=chain_id, residues=residues, name=description))

    chains.sort(key=lambda c: c.id)

    metadata: Dict[str, Any] = {"organisms": organisms}
    methods = [e.get("method") for e in entry.get("exptl") or [] if e.get("method")]
    if methods:
        metadata["method"] = methods[0]
    resolutions = [r.get("ls_d_res_high") for r in entry.get("refine") or [] if r.get("ls_d_res_high")]
    if resolutions:
        metadata["resolution"] = resolutions[0]

    entry_id = entry.get("rcsb_id", "")
    title = (entry.get("struct") or {}).get("title") or entry_id
    return SequenceData(id=entry_id, name=title, chains=chains, metadata=metadata)
