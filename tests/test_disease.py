import pytest
from phenorank.disease import DEFAULT_PREVALENCE, Disease


def test_defaults_for_catalogue_disease():
    d = Disease(id="OMIM:154700", name="Marfan syndrome", associated_term_ids=("HP:0001166",))
    assert d.prevalence == DEFAULT_PREVALENCE
    assert d.match_score is None
    assert d.inheritance == () and d.genes == ()


@pytest.mark.parametrize("bad_id", ["154700", "OMIM:", ":154700", ""])
def test_invalid_disease_id_raises(bad_id):
    with pytest.raises(ValueError):
        Disease(id=bad_id, name="Marfan syndrome")


def test_duplicate_association_raises():
    with pytest.raises(ValueError):
        Disease(id="OMIM:154700", name="Marfan syndrome", associated_term_ids=("HP:0001166", "HP:0001166"))


def test_scored_copy_keeps_catalogue_entry_neutral():
    d = Disease(id="OMIM:154700", name="Marfan syndrome", associated_term_ids=("HP:0001166",))
    ranked = d.scored(1.0)
    assert ranked.match_score == 1.0
    assert d.match_score is None


def test_matched_term_ids_in_catalogue_order():
    d = Disease(
        id="OMIM:154700",
        name="Marfan syndrome",
        associated_term_ids=("HP:0001166", "HP:0001083", "HP:0002616"),
    )
    assert d.matched_term_ids({"HP:0002616", "HP:0001166", "HP:9999999"}) == ["HP:0001166", "HP:0002616"]
