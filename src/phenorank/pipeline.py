"""
Intake analysis pipeline: text → phenotype terms → ranked diseases.
"""

import typing
from dataclasses import dataclass, replace

from .catalogue import VocabularyCatalogue
from .disease import Disease
from .extractor import TermExtractor
from .intake import IntakeRecord
from .phenotype import PhenotypeTerm
from .ranker import DiseaseRanker


@dataclass(frozen=True)
class PipelineResult:
    """Extracted terms and the differential they produce, both best first."""

    terms: typing.Tuple[PhenotypeTerm, ...]
    diseases: typing.Tuple[Disease, ...]

    def top(self, n: int) -> typing.Tuple[Disease, ...]:
        return self.diseases[:max(n, 0)]


class AnalysisPipeline:
    """
    Runs extraction then ranking over one shared catalogue.

    No retries and no partial results: a catalogue failure aborts the call
    with DataLoadError.
    """

    def __init__(self, catalogue: VocabularyCatalogue):
        self.catalogue = catalogue
        self.extractor = TermExtractor(catalogue)
        self.ranker = DiseaseRanker(catalogue)

    def process(self, text: str) -> PipelineResult:
        terms = self.extractor.extract(text)
        diseases = self.ranker.rank(terms)
        return PipelineResult(terms=tuple(terms), diseases=tuple(diseases))

    def analyze(self, record: IntakeRecord) -> IntakeRecord:
        """Return a copy of `record` carrying the analysis of its free text."""
        result = self.process(record.combined_text())
        return replace(record, terms=result.terms, diseases=result.diseases)
