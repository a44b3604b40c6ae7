"""
Disease ranking by phenotype overlap.
"""

import typing

from .catalogue import VocabularyCatalogue
from .disease import Disease
from .phenotype import PhenotypeTerm


def match_score(disease: Disease, present_ids: typing.AbstractSet[str]) -> float:
    """
    Fraction of the disease's associated terms that are present.

    The denominator is always the size of the disease's own term set, however
    many terms were observed. A disease without associations scores 0.
    """
    if not disease.associated_term_ids:
        return 0.0
    matched = sum(1 for term_id in disease.associated_term_ids if term_id in present_ids)
    return matched / len(disease.associated_term_ids)


class DiseaseRanker:
    """Scores every catalogue disease against a set of observed phenotype terms."""

    def __init__(self, catalogue: VocabularyCatalogue):
        self._catalogue = catalogue

    def rank(self, terms: typing.Iterable[PhenotypeTerm]) -> list[Disease]:
        """
        Return the diseases sharing at least one term with `terms`, best first.

        Only term presence counts; confidences are ignored. Diseases with equal
        scores keep catalogue order.

        Raises:
            DataLoadError: if the catalogue cannot be loaded.
        """
        return self.rank_ids(term.id for term in terms)

    def rank_ids(self, term_ids: typing.Iterable[str]) -> list[Disease]:
        _, diseases = self._catalogue.load()
        present_ids = frozenset(term_ids)

        scored = []
        for disease in diseases:
            score = match_score(disease, present_ids)
            if score > 0:
                scored.append(disease.scored(score))

        return sorted(scored, key=lambda d: d.match_score, reverse=True)
