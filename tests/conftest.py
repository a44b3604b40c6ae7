import os
import pathlib
import typing

import hpotk
import pytest

from phenorank.catalogue import VocabularyCatalogue

HEADER = "disease_id,disease_name,hpo_id,hpo_name"

# Small catalogue with hand-checkable scores:
#   OMIM:100001 has three terms, OMIM:100002 two, OMIM:100003 one, OMIM:100004 none
SMALL_CATALOGUE_ROWS = [
    "OMIM:100001,Alpha syndrome,HP:0001166,Arachnodactyly",
    "OMIM:100001,Alpha syndrome,HP:0002616,Aortic root aneurysm",
    "OMIM:100001,Alpha syndrome,HP:0000098,Tall stature",
    "OMIM:100002,Beta syndrome,HP:0001166,Arachnodactyly",
    "OMIM:100002,Beta syndrome,HP:0004322,Short stature",
    "OMIM:100003,Gamma syndrome,HP:0000175,Cleft palate",
    "OMIM:100004,Delta syndrome,,",
]


@pytest.fixture
def write_catalogue(tmp_path: pathlib.Path) -> typing.Callable[..., pathlib.Path]:
    """
    Factory writing association rows to a CSV in `tmp_path`, returning its path.
    """
    def _write(rows: typing.Sequence[str], header: str = HEADER, name: str = "catalogue.csv") -> pathlib.Path:
        path = tmp_path / name
        path.write_text("\n".join([header, *rows]) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def small_catalogue(write_catalogue) -> VocabularyCatalogue:
    return VocabularyCatalogue(write_catalogue(SMALL_CATALOGUE_ROWS))


@pytest.fixture
def bundled_catalogue() -> VocabularyCatalogue:
    """
    The catalogue shipped with the package; a fresh instance per test.
    """
    return VocabularyCatalogue()


@pytest.fixture(scope="session")
def fpath_test_dir() -> str:
    """
    Path to `tests/data/` folder.
    """
    return os.path.join(os.path.dirname(__file__), "data")


@pytest.fixture(scope="session")
def fpath_hpo(fpath_test_dir: str) -> str:
    return os.path.join(fpath_test_dir, "hp.mini.json")


@pytest.fixture(scope="session")
def hpo(fpath_hpo: str) -> hpotk.MinimalOntology:
    """
    A seven-term HPO graph: the root, Phenotypic abnormality, and the terms of `small_catalogue`.
    """
    return hpotk.load_minimal_ontology(fpath_hpo)
