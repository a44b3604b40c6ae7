"""
Command-line interface for phenorank.
Extracts HPO terms from intake text and ranks candidate rare diseases against
the phenotype catalogue.
"""

import click
import hpotk
import pathlib
import requests
import sys
import typing

from stairval.notepad import create_notepad

from .catalogue import DataLoadError, VocabularyCatalogue
from .export import write_phenopacket
from .intake import IntakeRecord
from .pipeline import AnalysisPipeline

DEFAULT_HPO_DIR = "data"
HPO_RELEASES_API = "https://api.github.com/repos/obophenotype/human-phenotype-ontology/releases/latest"
HPO_DOWNLOAD_URL = "https://github.com/obophenotype/human-phenotype-ontology/releases/download/{tag}/hp.json"


@click.group()
def main():
    """phenorank: phenotype extraction and rare-disease ranking for clinical intake notes."""
    pass


@main.command(name="analyze")
@click.option("-t", "--text", "text", default="", help="intake text (chief complaint, symptoms, history, exam)")
@click.option(
    "-f",
    "--text-file",
    "text_file",
    type=click.Path(exists=True, dir_okay=False),
    help="read intake text from a file (appended after --text)",
)
@click.option("-p", "--patient-id", default="anonymous", show_default=True, help="patient identifier for the intake record")
@click.option(
    "-c",
    "--catalogue",
    "catalogue_path",
    type=click.Path(dir_okay=False),
    help="disease–phenotype association table (defaults to the bundled catalogue)",
)
@click.option("-n", "--top", default=10, show_default=True, type=click.IntRange(min=1), help="number of diseases to show")
@click.option(
    "--phenopacket-dir",
    type=click.Path(file_okay=False),
    help="also write the analysed intake as a Phenopacket JSON into this folder",
)
def analyze(
    text: str,
    text_file: typing.Optional[str],
    patient_id: str,
    catalogue_path: typing.Optional[str],
    top: int,
    phenopacket_dir: typing.Optional[str],
):
    """
    Extract phenotype terms from intake text and print the ranked differential.
    """
    # 1) Assemble the text blob
    parts = [text]
    if text_file:
        parts.append(pathlib.Path(text_file).read_text(encoding="utf-8"))
    intake_text = " ".join(p.strip() for p in parts if p.strip())
    if not intake_text:
        raise click.UsageError("Provide intake text with --text or --text-file.")

    # 2) Run the pipeline
    pipeline = AnalysisPipeline(VocabularyCatalogue(catalogue_path))
    try:
        record = pipeline.analyze(IntakeRecord(patient_id=patient_id, symptoms=intake_text))
    except DataLoadError as e:
        click.echo(click.style(f"Error: analysis unavailable: {e}", fg="red"), err=True)
        sys.exit(1)

    # 3) Report
    _echo_terms(record)
    _echo_diseases(record, top)

    # 4) Optional export
    if phenopacket_dir:
        out = write_phenopacket(record, phenopacket_dir)
        click.echo(f"Wrote phenopacket to {out}")


@main.command(name="search")
@click.argument("query")
@click.option("--diseases", "search_diseases", is_flag=True, help="search diseases instead of phenotype terms")
@click.option("-c", "--catalogue", "catalogue_path", type=click.Path(dir_okay=False), help="disease–phenotype association table")
def search(query: str, search_diseases: bool, catalogue_path: typing.Optional[str]):
    """
    Look up catalogue terms (or diseases) by name or identifier.
    """
    catalogue = VocabularyCatalogue(catalogue_path)
    try:
        if search_diseases:
            hits = [f"{d.id}\t{d.name}" for d in catalogue.search_diseases(query)]
        else:
            hits = [f"{t.id}\t{t.name}" for t in catalogue.search_terms(query)]
    except DataLoadError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    if not hits:
        click.echo(f"No matches for {query!r}")
    for hit in hits:
        click.echo(hit)


@main.command(name="validate-catalogue")
@click.option("-c", "--catalogue", "catalogue_path", type=click.Path(dir_okay=False), help="disease–phenotype association table")
@click.option(
    "-hpo",
    "--custom-hpo",
    "hpo_path",
    type=click.Path(exists=True, dir_okay=False),
    help="path to a custom HPO JSON file (defaults to data/hp.json)",
)
def validate_catalogue(catalogue_path: typing.Optional[str], hpo_path: typing.Optional[str]):
    """
    Check catalogue term ids and labels against an HPO release.
    """
    # 1) Load (or locate) the HPO JSON file
    hpo_file = _locate_hpo_file(hpo_path)
    ontology = _load_ontology(str(hpo_file))

    # 2) Load the catalogue, reporting load-time issues either way
    catalogue = VocabularyCatalogue(catalogue_path)
    try:
        catalogue.load()
    except DataLoadError:
        _report_issues(catalogue.notepad)
        sys.exit(1)
    _report_issues(catalogue.notepad)

    # 3) Ontology checks
    notepad = create_notepad("ontology")
    catalogue.validate(ontology, notepad)
    _report_issues(notepad)

    terms, diseases = catalogue.load()
    click.echo(f"Checked {len(terms)} terms across {len(diseases)} diseases")
    if notepad.has_errors(include_subsections=True):
        sys.exit(1)


@main.command(name="download")
@click.option(
    "-d",
    "--data-path",
    "data_dir",
    default=DEFAULT_HPO_DIR,
    type=click.Path(file_okay=False),
    help=f"where to save HPO JSON (default: {DEFAULT_HPO_DIR})",
)
@click.option(
    "-v",
    "--hpo-version",
    default=None,
    type=str,
    help="exact HPO release tag (e.g. 2025-03-03 or v2025-03-03)",
)
def download(data_dir: str, hpo_version: typing.Optional[str]):
    """
    Download a specific or the latest HPO JSON release for catalogue validation.
    """
    datadir = pathlib.Path(data_dir)
    datadir.mkdir(parents=True, exist_ok=True)
    # figure out which tag to download
    if hpo_version:
        tag = hpo_version if hpo_version.startswith("v") else f"v{hpo_version}"
    else:
        resp = requests.get(HPO_RELEASES_API)
        resp.raise_for_status()
        tag = resp.json()["tag_name"]

    click.echo(f"Downloading HPO release {tag} …")
    resp = requests.get(HPO_DOWNLOAD_URL.format(tag=tag))
    resp.raise_for_status()

    out = datadir / "hp.json"
    with open(out, "wb") as f:
        f.write(resp.content)

    click.echo(f"Saved HPO JSON to {out}")


def _echo_terms(record: IntakeRecord) -> None:
    if not record.terms:
        click.echo("No phenotype terms found.")
        return
    click.echo(f"Phenotype terms ({len(record.terms)}):")
    for term in record.terms:
        click.echo(f"  {term.id}  {term.name:<30} {term.confidence:.2f}")


def _echo_diseases(record: IntakeRecord, top: int) -> None:
    if not record.diseases:
        click.echo("No matching diseases.")
        return
    click.echo(f"Ranked diseases ({len(record.diseases)}):")
    present = [term.id for term in record.terms]
    for rank, disease in enumerate(record.diseases[:top], start=1):
        matched = len(disease.matched_term_ids(present))
        line = (
            f"  {rank:>2}. {disease.id:<12} {disease.name:<40} "
            f"{disease.match_score:.3f} ({matched}/{len(disease.associated_term_ids)} terms)"
        )
        click.echo(click.style(line, fg=_score_colour(disease.match_score)))


def _score_colour(score: float) -> str:
    # display bands for the differential
    if score >= 0.7:
        return "green"
    if score >= 0.4:
        return "yellow"
    return "red"


def _locate_hpo_file(hpo_path: typing.Optional[str]) -> pathlib.Path:
    # pick HPO JSON: either custom or default
    if hpo_path:
        hpo_file = pathlib.Path(hpo_path)
    else:
        hpo_file = pathlib.Path(DEFAULT_HPO_DIR) / "hp.json"
    if not hpo_file.is_file():
        click.echo(f"Error: HPO file not found at {hpo_file}", err=True)
        sys.exit(1)
    return hpo_file


def _load_ontology(hpo_file: str) -> hpotk.MinimalOntology:
    # load ontology from JSON
    return hpotk.load_minimal_ontology(hpo_file)


def _report_issues(notepad):
    # if there were errors, show them
    if notepad.has_errors(include_subsections=True):
        click.echo("Errors found in catalogue:")
        for err in notepad.errors():
            click.echo(f"- {err.message}")
    # show any warnings but keep going
    if notepad.has_warnings(include_subsections=True):
        click.echo("Warnings found in catalogue:")
        for w in notepad.warnings():
            click.echo(f"- {w.message}")


if __name__ == "__main__":
    main()
