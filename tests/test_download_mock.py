"""
Isolated tests for the 'download' command without hitting the network.

We patch requests.get:
- for the 'latest release' lookup (returns {'tag_name': 'vX'})
- for the actual file download (returns the file content).
"""

from click.testing import CliRunner
from unittest.mock import patch, Mock
from phenorank.__main__ import main


def test_download_mocks_network(tmp_path):
    runner = CliRunner()
    urls = []

    def fake_get(url, *args, **kwargs):
        urls.append(url)
        if url.endswith("/releases/latest"):
            return Mock(status_code=200, json=lambda: {"tag_name": "vX"})
        # second call returns the content of hp.json
        return Mock(status_code=200, content=b"{}")

    with patch("phenorank.__main__.requests.get", side_effect=fake_get):
        res = runner.invoke(main, ["download", "-d", str(tmp_path)])
    assert res.exit_code == 0, res.output
    assert (tmp_path / "hp.json").read_bytes() == b"{}"
    assert urls[1].endswith("/download/vX/hp.json")


def test_download_pinned_version_skips_lookup(tmp_path):
    runner = CliRunner()
    with patch("phenorank.__main__.requests.get", return_value=Mock(content=b"{}")) as get:
        res = runner.invoke(main, ["download", "-d", str(tmp_path / "hpo"), "-v", "2025-03-03"])
    assert res.exit_code == 0, res.output
    get.assert_called_once()
    assert "/download/v2025-03-03/hp.json" in get.call_args.args[0]
    assert (tmp_path / "hpo" / "hp.json").exists()
