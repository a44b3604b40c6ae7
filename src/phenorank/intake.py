"""
Intake domain model.

Defines the IntakeRecord dataclass for one patient encounter and the in-memory
IntakeStore that keeps analysed records for the session.
"""

import typing
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from .disease import Disease
from .phenotype import PhenotypeTerm

# Free-text fields, in the order they are concatenated for analysis
TEXT_FIELDS = (
    "chief_complaint",
    "symptoms",
    "medical_history",
    "family_history",
    "physical_exam",
)


def _new_record_id() -> str:
    return uuid.uuid4().hex


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class IntakeRecord:
    """
    Represents one clinical intake note and, once analysed, its results.

    Attributes:
        patient_id: Identifier of the patient the note belongs to.
        chief_complaint, symptoms, medical_history, family_history, physical_exam:
            Free-text fields entered by the clinician.
        id: Unique record identifier.
        timestamp: When the note was taken (UTC).
        terms: Extracted phenotype terms, best first.
        diseases: Ranked candidate diseases, best first.
    """

    patient_id: str
    chief_complaint: str = ""
    symptoms: str = ""
    medical_history: str = ""
    family_history: str = ""
    physical_exam: str = ""
    id: str = field(default_factory=_new_record_id)
    timestamp: datetime = field(default_factory=_utc_now)
    terms: typing.Tuple[PhenotypeTerm, ...] = ()
    diseases: typing.Tuple[Disease, ...] = ()

    def __post_init__(self):
        if not isinstance(self.patient_id, str):
            raise ValueError(
                f"patient_id must be a string, got {type(self.patient_id).__name__}"
            )
        # frozen: normalize through object.__setattr__
        object.__setattr__(self, "patient_id", self.patient_id.strip())
        for name in TEXT_FIELDS:
            object.__setattr__(self, name, (getattr(self, name) or "").strip())
        object.__setattr__(self, "terms", tuple(self.terms))
        object.__setattr__(self, "diseases", tuple(self.diseases))

        if not self.patient_id:
            raise ValueError("patient_id must not be blank")
        if not (self.symptoms or self.chief_complaint):
            raise ValueError("an intake needs symptoms or a chief complaint")

    def combined_text(self) -> str:
        """All free-text fields joined by single spaces, ready for extraction."""
        return " ".join(getattr(self, name) for name in TEXT_FIELDS)

    @property
    def is_analysed(self) -> bool:
        return bool(self.terms or self.diseases)


class IntakeStore:
    """
    Session-scoped, in-memory collection of intake records.

    Nothing is persisted; a new store starts empty.
    """

    def __init__(self):
        self._records: dict[str, IntakeRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def save(self, record: IntakeRecord) -> IntakeRecord:
        """Store `record`, replacing any record with the same id."""
        self._records[record.id] = record
        return record

    def records(self) -> list[IntakeRecord]:
        """All records, newest first."""
        return sorted(self._records.values(), key=lambda r: r.timestamp, reverse=True)

    def get(self, record_id: str) -> IntakeRecord | None:
        return self._records.get(record_id)

    def update(self, record_id: str, **changes: typing.Any) -> IntakeRecord:
        """
        Replace the stored record with a copy carrying `changes`.

        Raises:
            KeyError: if no record has `record_id`.
            ValueError: if the changes produce an invalid record.
        """
        if "id" in changes:
            raise ValueError("the id of a stored record cannot change")
        try:
            current = self._records[record_id]
        except KeyError:
            raise KeyError(f"Unknown intake record: {record_id!r}")
        updated = replace(current, **changes)
        self._records[record_id] = updated
        return updated

    def delete(self, record_id: str) -> None:
        """Remove the record if present."""
        self._records.pop(record_id, None)
