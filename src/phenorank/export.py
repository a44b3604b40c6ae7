"""
GA4GH Phenopacket export of analysed intake records.
"""

import pathlib

import phenopackets.schema.v2 as pps2
from google.protobuf.json_format import MessageToJson
from phenopackets.schema.v2.phenopackets_pb2 import Phenopacket

from .intake import IntakeRecord

CREATED_BY = "phenorank"
SCHEMA_VERSION = "2.0"


def to_phenopacket(record: IntakeRecord) -> Phenopacket:
    """
    Build one Phenopacket for an intake record:
      - subject = patient
      - one phenotypic feature per extracted term
      - one in-progress interpretation per candidate disease, best first
    """
    phenopacket = Phenopacket()
    phenopacket.id = record.id
    phenopacket.subject.id = record.patient_id

    # 1) Observed phenotypic features
    for term in record.terms:
        feature = phenopacket.phenotypic_features.add()
        feature.type.CopyFrom(pps2.OntologyClass(id=term.id, label=term.name))
        if term.confidence is not None:
            feature.description = f"extracted with confidence {term.confidence:.2f}"

    # 2) Differential: each candidate is a separate, unresolved interpretation
    for rank, disease in enumerate(record.diseases, start=1):
        interpretation = phenopacket.interpretations.add()
        interpretation.id = f"{record.id}-candidate-{rank}"
        interpretation.progress_status = interpretation.ProgressStatus.IN_PROGRESS
        interpretation.diagnosis.disease.CopyFrom(
            pps2.OntologyClass(id=disease.id, label=disease.name)
        )
        if disease.match_score is not None:
            interpretation.summary = f"rank {rank}, match score {disease.match_score:.3f}"

    # 3) Metadata
    meta_data = phenopacket.meta_data
    meta_data.created.FromDatetime(record.timestamp)
    meta_data.created_by = CREATED_BY
    meta_data.phenopacket_schema_version = SCHEMA_VERSION
    hpo_resource = meta_data.resources.add()
    hpo_resource.id = "hp"
    hpo_resource.name = "human phenotype ontology"
    hpo_resource.url = "http://purl.obolibrary.org/obo/hp.owl"
    hpo_resource.namespace_prefix = "HP"
    hpo_resource.iri_prefix = "http://purl.obolibrary.org/obo/HP_"

    return phenopacket


def write_phenopacket(record: IntakeRecord, output_dir: str | pathlib.Path) -> pathlib.Path:
    """Serialize the record's Phenopacket to `<output_dir>/<record id>.json`."""
    output_dir = pathlib.Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / f"{record.id}.json"
    with open(output_path, "w", encoding="utf-8") as out_f:
        out_f.write(MessageToJson(to_phenopacket(record)))
    return output_path
