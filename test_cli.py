import json

import pytest
from click.testing import CliRunner

from conftest import build_page
from pitch_extraction.cli import cli


EPISODE_URL = "https://thepitch.show/episodes/142-sundae/"


@pytest.fixture
def runner(mocker):
    mocker.patch("pitch_extraction.cli.setup_logging")
    return CliRunner()


def test_episode_from_saved_html(runner, tmp_path):
    page = tmp_path / "episode.html"
    page.write_text(build_page(body='<time datetime="2025-06-18">June 18</time>'), encoding="utf-8")

    result = runner.invoke(cli, ["episode", "--url", EPISODE_URL, "--extract", "date", "--html", str(page), "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["publishDate"] == "2025-06-18"


def test_episode_nothing_found_exits_nonzero(runner, tmp_path):
    page = tmp_path / "episode.html"
    page.write_text(build_page(body="<p>Nothing</p>"), encoding="utf-8")

    result = runner.invoke(cli, ["episode", "--url", EPISODE_URL, "--extract", "title", "--html", str(page), "--json"])

    assert result.exit_code == 1
    assert json.loads(result.stdout)["errorKind"] == "field_absent"


def test_episode_rejects_foreign_url(runner, mocker):
    fetcher = mocker.patch("pitch_extraction.cli.PageFetcher")

    result = runner.invoke(cli, ["episode", "--url", "https://example.com/x"])

    assert result.exit_code == 2
    fetcher.assert_not_called()


def test_quick_paste_from_file(runner, tmp_path, sample_memo):
    memo = tmp_path / "memo.txt"
    memo.write_text(sample_memo, encoding="utf-8")

    result = runner.invoke(cli, ["quick-paste", str(memo), "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["extractedData"]["name"] == "Acme Robotics"


def test_quick_paste_from_stdin(runner):
    result = runner.invoke(cli, ["quick-paste", "--json"], input="Investment Amount: $1.5M\n")

    assert json.loads(result.stdout)["extractedData"] == {"investment_amount": 1500000}


def test_episode_both_mode_from_saved_html(runner, tmp_path):
    page = tmp_path / "episode.html"
    page.write_text(build_page(body='<time datetime="2025-06-18">June 18</time>'), encoding="utf-8")

    result = runner.invoke(cli, ["episode", "--url", EPISODE_URL, "--extract", "both", "--html", str(page), "--json"])
    envelope = json.loads(result.stdout)

    assert result.exit_code == 0
    assert envelope["publishDate"] == "2025-06-18"
    assert envelope["transcriptError"] == "No transcript content found on the page"
