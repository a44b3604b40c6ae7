"""
Phenotype term extraction from free clinical text.

Matching is plain substring containment against the catalogue's term names,
in two tiers:

- exact phrase: the whole term name occurs in the text.
- partial keyword overlap: enough of the term's informative keywords occur.
"""

from .catalogue import VocabularyCatalogue
from .phenotype import PhenotypeTerm

# Confidence of a term whose full name occurs in the text, whatever its length.
EXACT_MATCH_CONFIDENCE = 0.95

# Partial matches never claim more than this, so they always rank below exact ones.
PARTIAL_MATCH_CAP = 0.9

# Partial matches must score strictly above this to be reported.
PARTIAL_MATCH_THRESHOLD = 0.5

# Keywords this short or shorter ("of", "the", "left") carry no signal.
MIN_KEYWORD_LENGTH = 3


def normalize(text: str) -> str:
    """Case-insensitive comparison form of `text`."""
    return text.casefold()


def keyword_overlap(term_name: str, text: str) -> float:
    """
    Fraction of the informative keywords of `term_name` found in normalized `text`.

    Keywords are whitespace-delimited; keywords of MIN_KEYWORD_LENGTH characters
    or fewer are ignored. A name with no informative keyword scores 0.
    """
    keywords = [
        keyword for keyword in normalize(term_name).split()
        if len(keyword) > MIN_KEYWORD_LENGTH
    ]
    if not keywords:
        return 0.0
    matched = sum(1 for keyword in keywords if keyword in text)
    return matched / len(keywords)


class TermExtractor:
    """Finds catalogue phenotype terms mentioned in a block of text."""

    def __init__(self, catalogue: VocabularyCatalogue):
        self._catalogue = catalogue

    def extract(self, text: str) -> list[PhenotypeTerm]:
        """
        Return the catalogue terms mentioned in `text`, best first.

        Each term appears once, carrying its confidence. Terms with equal
        confidence keep catalogue order.

        Raises:
            DataLoadError: if the catalogue cannot be loaded.
        """
        terms, _ = self._catalogue.load()
        normalized = normalize(text)

        found: dict[str, PhenotypeTerm] = {}
        for term in terms.values():
            confidence = self.score(term, normalized)
            if confidence is not None and term.id not in found:
                found[term.id] = term.scored(confidence)

        return sorted(found.values(), key=lambda t: t.confidence, reverse=True)

    @staticmethod
    def score(term: PhenotypeTerm, normalized_text: str) -> float | None:
        """Confidence that `normalized_text` mentions `term`, or None if it does not."""
        if normalize(term.name) in normalized_text:
            return EXACT_MATCH_CONFIDENCE

        confidence = min(PARTIAL_MATCH_CAP, keyword_overlap(term.name, normalized_text))
        if confidence > PARTIAL_MATCH_THRESHOLD:
            return confidence
        return None
