"""
Phenotype domain model.

Defines the PhenotypeTerm class for HPO vocabulary entries and extraction hits.
"""

import re
import typing
from dataclasses import dataclass, replace

# Patterns
_HPO_ID_PATTERN = re.compile(r"^HP:\d{7}$")


@dataclass(frozen=True)
class PhenotypeTerm:
    """
    Represents a single HPO term, either as a catalogue entry or as an extraction hit.

    Attributes:
        id: HPO term identifier ("HP:0001166").
        name: Canonical human-readable label.
        definition: Free-text description, may be empty.
        confidence: None for catalogue entries; strength of evidence in [0, 1]
            for a term returned by one extraction call.
    """

    id: str
    name: str
    definition: str = ""
    confidence: typing.Optional[float] = None

    def __post_init__(self):
        # Validate HPO ID
        if not isinstance(self.id, str) or not _HPO_ID_PATTERN.match(self.id):
            raise ValueError(f"Invalid HPO ID: {self.id!r}")

        # Validate name
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError(f"Term {self.id} must have a non-empty name")

        # Validate confidence
        if self.confidence is not None and not 0.0 <= self.confidence <= 1.0:
            raise ValueError(
                f"confidence must lie in [0, 1], got {self.confidence!r}"
            )

    def scored(self, confidence: float) -> "PhenotypeTerm":
        """Return a copy of this term carrying a per-extraction confidence."""
        return replace(self, confidence=confidence)
