"""
Disease domain model.

Defines the Disease dataclass for catalogue entries and ranked candidates.
"""

import re
import typing
from dataclasses import dataclass, replace

_DISEASE_ID_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*:[A-Za-z0-9_.-]+$")

DEFAULT_PREVALENCE = "Unknown"
DEFAULT_DESCRIPTION = "Rare disease characterized by multiple phenotypic features."


@dataclass(frozen=True)
class Disease:
    """
    Represents a rare disease and the phenotype terms known to accompany it.

    Attributes:
        id: CURIE of the disease (e.g. 'OMIM:154700').
        name: Human-readable label for the disease.
        prevalence: Free-text prevalence estimate.
        description: Short clinical description.
        associated_term_ids: HPO ids associated with the disease, de-duplicated,
            in catalogue order. The only evidence used for scoring.
        inheritance: Inheritance-mode labels.
        genes: Associated gene symbols.
        match_score: None for catalogue entries; fraction of associated terms
            present in the input for a disease returned by one ranking call.
    """

    id: str
    name: str
    prevalence: str = DEFAULT_PREVALENCE
    description: str = DEFAULT_DESCRIPTION
    associated_term_ids: typing.Tuple[str, ...] = ()
    inheritance: typing.Tuple[str, ...] = ()
    genes: typing.Tuple[str, ...] = ()
    match_score: typing.Optional[float] = None

    def __post_init__(self):
        if not isinstance(self.id, str) or not _DISEASE_ID_PATTERN.match(self.id):
            raise ValueError(f"Invalid disease ID: {self.id!r}")
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError(f"Disease {self.id} must have a non-empty name")
        if len(set(self.associated_term_ids)) != len(self.associated_term_ids):
            raise ValueError(f"Disease {self.id} lists an associated term twice")
        if self.match_score is not None and not 0.0 <= self.match_score <= 1.0:
            raise ValueError(
                f"match_score must lie in [0, 1], got {self.match_score!r}"
            )

    def scored(self, match_score: float) -> "Disease":
        """Return a copy of this disease carrying a per-ranking match score."""
        return replace(self, match_score=match_score)

    def matched_term_ids(self, term_ids: typing.Iterable[str]) -> list[str]:
        """Associated term ids that occur in `term_ids`, in catalogue order."""
        present = set(term_ids)
        return [term_id for term_id in self.associated_term_ids if term_id in present]
