"""
Unit tests for small helpers in __main__.py:
- _report_issues: prints warnings/errors to stdout
- _locate_hpo_file: exits when the HPO JSON is missing
- _score_colour: display bands for match scores
"""

import pytest
from phenorank.__main__ import _locate_hpo_file, _report_issues, _score_colour
from stairval.notepad import create_notepad


def test_report_issues_outputs_both_blocks(capsys):
    """
    When notepad contains both warnings and errors, the helper should print both sections.
    """
    n = create_notepad("report")
    n.add_warning("warn 1")
    n.add_error("err 1")

    _report_issues(n)
    out = capsys.readouterr().out
    assert "Warnings found in catalogue" in out
    assert "warn 1" in out
    assert "Errors found in catalogue" in out
    assert "err 1" in out


def test_report_issues_silent_when_clean(capsys):
    _report_issues(create_notepad("clean"))
    assert capsys.readouterr().out == ""


def test_locate_hpo_file_missing_exits(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit):
        _locate_hpo_file(None)


def test_locate_hpo_file_custom(tmp_path):
    hpo = tmp_path / "hp.json"
    hpo.write_text("{}", encoding="utf-8")
    assert _locate_hpo_file(str(hpo)) == hpo


@pytest.mark.parametrize("score, colour", [(1.0, "green"), (0.7, "green"), (0.5, "yellow"), (0.2, "red")])
def test_score_colour(score, colour):
    assert _score_colour(score) == colour
