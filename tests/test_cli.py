"""Tests for the command-line interface."""
import pytest
from click.testing import CliRunner

from storylingo.cli import cli
from storylingo.config import config
from storylingo.storage.document_store import JsonFileDocumentStore
from storylingo.storage.draft_store import DraftStore


@pytest.fixture()
def runner():
    return CliRunner()


@pytest.fixture()
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "data_dir", tmp_path)
    return tmp_path


def test_assess_requires_api_key(runner, monkeypatch):
    monkeypatch.setattr(config, "openai_api_key", "")

    result = runner.invoke(cli, ["assess", "-o", "Der Hund.", "-t", "The dog.", "-s", "de", "-l", "en"])

    assert result.exit_code != 0
    assert "OPENAI_API_KEY is not set" in result.output


def test_assess_skips_text_the_trigger_would_ignore(runner, monkeypatch):
    monkeypatch.setattr(config, "openai_api_key", "sk-test")

    result = runner.invoke(cli, [
        "assess", "-o", "Der Hund läuft schnell.", "-t", "The dog runs", "-s", "de", "-l", "en",
    ])

    assert result.exit_code == 0
    assert "Not assessed" in result.output
    assert "not at boundary" in result.output


def test_alternatives_need_full_sentence(runner, monkeypatch):
    monkeypatch.setattr(config, "openai_api_key", "sk-test")

    result = runner.invoke(cli, [
        "alternatives", "-o", "Der Hund läuft schnell.", "-t", "The dog runs", "-s", "de", "-l", "en",
    ])

    assert result.exit_code == 0
    assert "complete at least one full sentence" in result.output


def test_drafts_list_and_delete(runner, data_dir):
    store = DraftStore(JsonFileDocumentStore(data_dir))
    draft = store.create("story-1", "reader@example.com", "The dog runs fast.", "en")

    result = runner.invoke(cli, ["drafts", "list", "--story", "story-1", "--user", "reader@example.com"])
    assert result.exit_code == 0
    assert "No drafts saved yet" not in result.output

    result = runner.invoke(cli, ["drafts", "delete", "--story", "story-1", "--user", "reader@example.com", draft.id])
    assert result.exit_code == 0

    reloaded = DraftStore(JsonFileDocumentStore(data_dir))
    assert reloaded.list("story-1", "reader@example.com") == []


def test_drafts_list_empty(runner, data_dir):
    result = runner.invoke(cli, ["drafts", "list", "--story", "story-1", "--user", "nobody"])

    assert result.exit_code == 0
    assert "No drafts saved yet" in result.output
