"""
Vocabulary catalogue.

Folds the flat disease–phenotype association table (one row per disease–term
pair) into HPO terms and diseases. A catalogue parses its source once and then
serves the same read-only structures to every extractor and ranker built on it.
"""

import logging
import pathlib
import threading
import types
import typing
import zipfile

import hpotk
from hpotk.validate import (
    ObsoleteTermIdsValidator,
    PhenotypicAbnormalityValidator,
    AnnotationPropagationValidator,
    ValidationRunner,
)
import pandas as pd
from stairval.notepad import Notepad, create_notepad

from .disease import DEFAULT_DESCRIPTION, DEFAULT_PREVALENCE, Disease
from .loader import load_association_table
from .phenotype import PhenotypeTerm

logger = logging.getLogger(__name__)

DEFAULT_CATALOGUE_PATH = pathlib.Path(__file__).parent / "data" / "diseasephenotype.csv"

# Columns every association table must provide (after header normalization)
REQUIRED_COLUMNS = ("disease_id", "disease_name", "hpo_id", "hpo_name")

# Optional per-disease columns; the first non-blank value seen for a disease wins
DISEASE_DETAIL_COLUMNS = ("prevalence", "description", "inheritance", "genes")

# Separator for multi-valued cells (inheritance, genes)
LIST_SEPARATOR = ";"

CatalogueContents = typing.Tuple[
    typing.Mapping[str, PhenotypeTerm], typing.Tuple[Disease, ...]
]


class DataLoadError(Exception):
    """
    The catalogue source is missing, unreadable or malformed.

    Nothing that needs the vocabulary can proceed after this error.
    """

    def __init__(self, message: str, errors: typing.Iterable[str] = ()):
        super().__init__(message)
        self.errors = tuple(errors)


class VocabularyCatalogue:
    """
    Read-only HPO term and disease catalogue backed by an association table.

    Construct one instance and hand it to every component that needs it.
    `load()` parses the source on first use and caches the result until
    `close()` is called.
    """

    def __init__(self, source: str | pathlib.Path | None = None):
        self._source = pathlib.Path(source) if source is not None else DEFAULT_CATALOGUE_PATH
        self._lock = threading.Lock()
        # contents and disease index are published together as one tuple
        self._loaded: typing.Tuple[CatalogueContents, dict[str, Disease]] | None = None
        self.notepad: Notepad = create_notepad("catalogue")

    def __enter__(self) -> "VocabularyCatalogue":
        self.load()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    @property
    def source(self) -> pathlib.Path:
        return self._source

    @property
    def is_loaded(self) -> bool:
        return self._loaded is not None

    def load(self) -> CatalogueContents:
        """
        Return `(terms by id, diseases)`, parsing the source on the first call.

        Raises:
            DataLoadError: if the source cannot be read or contains errors.
        """
        return self._snapshot()[0]

    def close(self) -> None:
        """Drop the cached contents; the next `load()` re-reads the source."""
        with self._lock:
            self._loaded = None

    def _snapshot(self) -> typing.Tuple[CatalogueContents, dict[str, Disease]]:
        loaded = self._loaded
        if loaded is not None:
            return loaded
        with self._lock:
            # another caller may have finished loading while we waited
            if self._loaded is None:
                contents = self._read()
                self._loaded = (contents, {d.id: d for d in contents[1]})
            return self._loaded

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def terms(self) -> list[PhenotypeTerm]:
        terms, _ = self.load()
        return list(terms.values())

    def diseases(self) -> list[Disease]:
        _, diseases = self.load()
        return list(diseases)

    def get_term(self, term_id: str) -> PhenotypeTerm | None:
        terms, _ = self.load()
        return terms.get(term_id)

    def get_disease(self, disease_id: str) -> Disease | None:
        _, diseases_by_id = self._snapshot()
        return diseases_by_id.get(disease_id)

    def search_terms(self, query: str) -> list[PhenotypeTerm]:
        """Terms whose name or id contains `query`, case-insensitively, in catalogue order."""
        needle = query.strip().casefold()
        return [
            term for term in self.terms()
            if needle in term.name.casefold() or needle in term.id.casefold()
        ]

    def search_diseases(self, query: str) -> list[Disease]:
        """Diseases whose name or id contains `query`, case-insensitively, in catalogue order."""
        needle = query.strip().casefold()
        return [
            disease for disease in self.diseases()
            if needle in disease.name.casefold() or needle in disease.id.casefold()
        ]

    # ------------------------------------------------------------------
    # Ontology validation
    # ------------------------------------------------------------------

    def validate(self, hpo: hpotk.MinimalOntology, notepad: Notepad) -> None:
        """
        Check catalogue terms against an HPO release:
          - ids missing from the ontology and label mismatches are warnings
          - obsolete / non-phenotypic-abnormality ids are reported by the hpotk validators
          - a disease annotated with both a term and one of its ancestors is reported per disease
        """
        terms, diseases = self.load()
        all_ids: list[hpotk.TermId] = []
        for term in terms.values():
            term_id = hpotk.TermId.from_curie(term.id)
            all_ids.append(term_id)
            ontology_term = hpo.get_term(term_id)
            if ontology_term is None:
                notepad.add_warning(f"HPO ID {term.id!r} not found in ontology")
            elif term.name.casefold() != ontology_term.name.casefold():
                notepad.add_warning(
                    f"label {term.name!r} does not match ontology name {ontology_term.name!r} for {term.id}"
                )

        if not all_ids:
            return

        runner = ValidationRunner(
            validators=[ObsoleteTermIdsValidator(hpo), PhenotypicAbnormalityValidator(hpo)]
        )
        _record_validation_results(runner.validate_all(all_ids), "catalogue", notepad)

        propagation = ValidationRunner(validators=[AnnotationPropagationValidator(hpo)])
        for disease in diseases:
            if not disease.associated_term_ids:
                continue
            disease_ids = [hpotk.TermId.from_curie(t) for t in disease.associated_term_ids]
            _record_validation_results(propagation.validate_all(disease_ids), disease.id, notepad)

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def _read(self) -> CatalogueContents:
        notepad = create_notepad("catalogue")
        self.notepad = notepad

        try:
            df = load_association_table(self._source)
        except (OSError, ValueError, zipfile.BadZipFile) as e:
            notepad.add_error(f"Cannot read catalogue source {str(self.source)!r}: {e}")
            raise DataLoadError(f"Cannot read catalogue source {str(self.source)!r}", [str(e)]) from e

        contents = fold_association_table(df, notepad)
        if contents is None or notepad.has_errors(include_subsections=True):
            messages = [issue.message for issue in notepad.errors()]
            raise DataLoadError(
                f"Malformed catalogue source {str(self.source)!r}: " + "; ".join(messages),
                messages,
            )

        terms, diseases = contents
        logger.info(
            "Loaded %d phenotype terms and %d diseases from %s",
            len(terms),
            len(diseases),
            self.source,
        )
        return contents


def fold_association_table(df: pd.DataFrame, notepad: Notepad) -> CatalogueContents | None:
    """
    Fold association rows into terms and diseases, preserving first-seen order.

    Problems are recorded on `notepad`; returns None when the table cannot be used at all.
    """
    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        notepad.add_error(f"Association table is missing required columns: {missing}")
        return None
    if df.empty:
        notepad.add_error("Association table has no rows")
        return None

    term_fields: dict[str, dict[str, str]] = {}
    disease_fields: dict[str, dict[str, typing.Any]] = {}

    for index, row in df.iterrows():
        blank = [column for column in REQUIRED_COLUMNS if not row[column]]
        # a disease row without any term declares a disease with no known associations
        term_less = blank == ["hpo_id", "hpo_name"]
        if blank and not term_less:
            notepad.add_error(f"Row {index}: blank value in {blank}")
            continue

        hpo_id, hpo_name = row["hpo_id"], row["hpo_name"]
        if term_less:
            notepad.add_warning(f"Row {index}: {row['disease_id']} has no phenotype association")
        else:
            term = term_fields.setdefault(hpo_id, {"name": hpo_name, "definition": ""})
            if term["name"] != hpo_name:
                notepad.add_warning(
                    f"Row {index}: {hpo_id} is named {hpo_name!r} here but {term['name']!r} earlier; keeping the first"
                )
            if not term["definition"]:
                term["definition"] = row.get("hpo_definition", "")

        disease_id, disease_name = row["disease_id"], row["disease_name"]
        disease = disease_fields.setdefault(
            disease_id, {"name": disease_name, "term_ids": []}
        )
        if disease["name"] != disease_name:
            notepad.add_warning(
                f"Row {index}: {disease_id} is named {disease_name!r} here but {disease['name']!r} earlier; keeping the first"
            )
        for column in DISEASE_DETAIL_COLUMNS:
            if not disease.get(column):
                disease[column] = row.get(column, "")
        if term_less:
            continue
        if hpo_id in disease["term_ids"]:
            notepad.add_warning(f"Row {index}: duplicate association {disease_id} – {hpo_id} ignored")
        else:
            disease["term_ids"].append(hpo_id)

    terms: dict[str, PhenotypeTerm] = {}
    for hpo_id, fields in term_fields.items():
        try:
            terms[hpo_id] = PhenotypeTerm(
                id=hpo_id, name=fields["name"], definition=fields["definition"]
            )
        except ValueError as e:
            notepad.add_error(str(e))

    diseases: list[Disease] = []
    for disease_id, fields in disease_fields.items():
        try:
            diseases.append(
                Disease(
                    id=disease_id,
                    name=fields["name"],
                    prevalence=fields.get("prevalence") or DEFAULT_PREVALENCE,
                    description=fields.get("description") or DEFAULT_DESCRIPTION,
                    associated_term_ids=tuple(fields["term_ids"]),
                    inheritance=_split_list(fields.get("inheritance", "")),
                    genes=_split_list(fields.get("genes", "")),
                )
            )
        except ValueError as e:
            notepad.add_error(str(e))

    return types.MappingProxyType(terms), tuple(diseases)


def _split_list(cell: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in cell.split(LIST_SEPARATOR) if item.strip())


def _record_validation_results(results, label: str, notepad: Notepad) -> None:
    for issue in results.results:
        msg = f"{label}: {issue.message}"
        if issue.level.name == "ERROR":
            notepad.add_error(msg)
        else:
            notepad.add_warning(msg)
