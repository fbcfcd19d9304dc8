from unittest.mock import MagicMock

import pytest
import requests

from repositories.base_repository import AbstractSequenceRepository, SequenceFetchError
from repositories.file_based_repository import FileBasedRepository
from repositories.rcsb_repository import RcsbRepository, convert_entry
from repositories.repository_factory import RepositoryFactory
from repositories.sequence_data_manager import SequenceDataManager
from settings.config import AppConfig, DataSourceSettings

FASTA = """\
>4HHB_1|Chains A, C|Hemoglobin subunit alpha|Homo sapiens
VLSPADKTNV
>4HHB_2|Chains B[auth D]|Hemoglobin subunit beta|Homo sapiens
VHLTPEEK
>1CRN_A
TTCCPSIV
>1CRN:B
TT-CC
>Z
MKV
"""

ENTRY = {
    "rcsb_id": "1ABC",
    "struct": {"title": "Test complex"},
    "exptl": [{"method": "X-RAY DIFFRACTION"}],
    "refine": [{"ls_d_res_high": 1.8}],
    "polymer_entities": [
        {
            "entity_poly": {"pdbx_seq_one_letter_code_can": "MKX\nTA", "type": "polypeptide(L)"},
            "rcsb_entity_source_organism": [{"ncbi_scientific_name": "Homo sapiens"}],
            "rcsb_polymer_entity": {"pdbx_description": "Kinase"},
            "rcsb_polymer_entity_container_identifiers": {"auth_asym_ids": ["B", "A"], "entity_id": "1"},
        },
        {
            "entity_poly": {"pdbx_seq_one_letter_code_can": "ACGU", "type": "polyribonucleotide"},
            "rcsb_entity_source_organism": [],
            "rcsb_polymer_entity": {"pdbx_description": "RNA"},
            "rcsb_polymer_entity_container_identifiers": {"auth_asym_ids": ["R"], "entity_id": "2"},
        },
    ],
}


@pytest.fixture
def fasta_file(tmp_path):
    path = tmp_path / "mixed.fasta"
    path.write_text(FASTA)
    return path


def mock_session(payload=None, exc=None):
    session = MagicMock()
    session.headers = {}
    if exc is not None:
        session.post.side_effect = exc
    else:
        response = MagicMock()
        response.json.return_value = payload
        session.post.return_value = response
    return session


# ---------------------------------------------------------------------------
# FASTA
# ---------------------------------------------------------------------------


def test_fasta_rcsb_headers_expand_chains(fasta_file):
    data = FileBasedRepository(fasta_file).fetch_sequence("4hhb")
    assert data.id == "4HHB"
    assert data.chain_ids == ["A", "C", "D"]
    assert data.chain("A").sequence == "VLSPADKTNV"
    assert data.chain("D").name == "Hemoglobin subunit beta"


def test_fasta_record_ids_and_gaps(fasta_file):
    data = FileBasedRepository(fasta_file).fetch_sequence("1CRN")
    assert data.chain_ids == ["A", "B"]
    chain_b = data.chain("B")
    assert [r.position for r in chain_b.residues] == [1, 2, 4, 5]
    assert data.sequence_for("A", 3, 5) == "CCP"


def test_fasta_bare_ids_belong_to_file_stem(fasta_file):
    repo = FileBasedRepository(fasta_file)
    assert repo.fetch_sequence("mixed").chain_ids == ["Z"]
    assert repo.fetch_sequence("mixed").chain("Z").sequence == "MKV"


def test_fasta_unknown_structure(fasta_file):
    with pytest.raises(SequenceFetchError, match="Failed to fetch sequence data for 9XYZ"):
        FileBasedRepository(fasta_file).fetch_sequence("9XYZ")


def test_fasta_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        FileBasedRepository(tmp_path / "missing.fasta")


# ---------------------------------------------------------------------------
# RCSB
# ---------------------------------------------------------------------------


def test_convert_entry():
    data = convert_entry(ENTRY)
    assert data.id == "1ABC"
    assert data.name == "Test complex"
    assert data.chain_ids == ["A", "B"]
    chain = data.chain("A")
    assert chain.sequence == "MKTA"
    assert [r.position for r in chain.residues] == [1, 2, 4, 5]
    assert chain.name == "Kinase"
    assert data.metadata == {
        "organisms": ["Homo sapiens"],
        "method": "X-RAY DIFFRACTION",
        "resolution": 1.8,
    }


def test_rcsb_fetch_posts_graphql_query():
    session = mock_session({"data": {"entry": ENTRY}})
    data = RcsbRepository(session=session, timeout=5).fetch_sequence(" 1abc ")
    assert data.chain_ids == ["A", "B"]
    _, kwargs = session.post.call_args
    assert kwargs["json"]["variables"] == {"entryId": "1ABC"}
    assert kwargs["timeout"] == 5


def test_rcsb_network_error_becomes_fetch_error():
    session = mock_session(exc=requests.ConnectionError("offline"))
    with pytest.raises(SequenceFetchError, match="offline"):
        RcsbRepository(session=session).fetch_sequence("1ABC")


def test_rcsb_missing_entry():
    session = mock_session({"data": {"entry": None}})
    with pytest.raises(SequenceFetchError, match="no data found"):
        RcsbRepository(session=session).fetch_sequence("0000")


def test_rcsb_graphql_errors():
    session = mock_session({"errors": [{"message": "bad id"}]})
    with pytest.raises(SequenceFetchError, match="bad id"):
        RcsbRepository(session=session).fetch_sequence("1ABC")


def test_rcsb_entry_without_protein_chains():
    entry = dict(ENTRY, polymer_entities=ENTRY["polymer_entities"][1:])
    session = mock_session({"data": {"entry": entry}})
    with pytest.raises(SequenceFetchError, match="no polypeptide chains"):
        RcsbRepository(session=session).fetch_sequence("1ABC")


# ---------------------------------------------------------------------------
# Manager / factory
# ---------------------------------------------------------------------------


class CountingRepository(AbstractSequenceRepository):
    def __init__(self, inner):
        self.inner = inner
        self.calls = 0

    def fetch_sequence(self, structure_id):
        self.calls += 1
        return self.inner.fetch_sequence(structure_id)


def test_manager_caches_by_upper_case_id(fasta_file):
    repo = CountingRepository(FileBasedRepository(fasta_file))
    manager = SequenceDataManager(repo)

    first = manager.load("1crn")
    second = manager.load("1CRN")
    assert first.ok and not first.from_cache
    assert second.ok and second.from_cache
    assert second.data is first.data
    assert repo.calls == 1
    assert manager.cached_ids() == ["1CRN"]

    manager.clear_cache("1crn")
    assert manager.get_cached("1CRN") is None


def test_manager_returns_error_result(fasta_file):
    manager = SequenceDataManager(FileBasedRepository(fasta_file))
    result = manager.load("9XYZ")
    assert not result.ok
    assert result.data is None
    assert "9XYZ" in result.error
    assert manager.cached_ids() == []


def test_factory_builds_configured_repository(fasta_file):
    config = AppConfig(data_source=DataSourceSettings(type="file", config={"fasta_path": str(fasta_file)}))
    assert isinstance(RepositoryFactory(config).create_repository(), FileBasedRepository)

    config = AppConfig(data_source=DataSourceSettings(type="file"))
    with pytest.raises(ValueError, match="fasta_path"):
        RepositoryFactory(config).create_repository()

    config = AppConfig(data_source=DataSourceSettings(type="rcsb", config={"timeout": 3}))
    repo = RepositoryFactory(config).create_repository()
    assert isinstance(repo, RcsbRepository)
    assert repo.timeout == 3.0
