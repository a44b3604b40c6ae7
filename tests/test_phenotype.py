import pytest
from phenorank.phenotype import PhenotypeTerm


def test_valid_term_instantiation():
    """A valid catalogue term has no confidence attached."""
    t = PhenotypeTerm(id="HP:0001166", name="Arachnodactyly")
    assert t.confidence is None
    assert t.definition == ""


@pytest.mark.parametrize("bad_hpo", ["HP:123", "0001166", "HP:ABCDEF1", "hp:0001166"])
def test_invalid_hpo_id_raises(bad_hpo):
    """Malformed HPO IDs must trigger a ValueError."""
    with pytest.raises(ValueError):
        PhenotypeTerm(id=bad_hpo, name="Arachnodactyly")


def test_blank_name_raises():
    with pytest.raises(ValueError):
        PhenotypeTerm(id="HP:0001166", name="   ")


@pytest.mark.parametrize("bad_confidence", [-0.1, 1.01])
def test_confidence_out_of_range_raises(bad_confidence):
    with pytest.raises(ValueError):
        PhenotypeTerm(id="HP:0001166", name="Arachnodactyly", confidence=bad_confidence)


def test_scored_returns_copy_and_leaves_catalogue_entry_untouched():
    t = PhenotypeTerm(id="HP:0001166", name="Arachnodactyly", definition="Long fingers.")
    hit = t.scored(0.95)
    assert hit.confidence == 0.95
    assert hit.definition == "Long fingers."
    assert t.confidence is None
    assert hit is not t
