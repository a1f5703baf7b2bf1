"""Tests for the StoryLingo REST API."""
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from conftest import FakeAssistant
from storylingo.models.assessment import AssessmentResult
from storylingo.translation.clients.deepl_client import DeepLClient
from storylingo.translation.word_translator import WordTranslator
from storylingo.web.app import create_app

USER = {"X-User-Id": "reader@example.com"}


class FakeDeepLTranslator:
    def __init__(self, fail=False):
        self.fail = fail

    def translate_text(self, **kwargs):
        if self.fail:
            raise RuntimeError("service unavailable")
        return SimpleNamespace(text="dog")


@pytest.fixture()
def fake_assistant():
    return FakeAssistant(
        result=AssessmentResult(score=60, feedback="Verb form", new_translate=True, translation="The dog runs fast."),
        alternatives=["The dog sprints.", "The hound runs quickly.", "The dog dashes."],
        completion="The dog runs fast. The cat sleeps.",
    )


@pytest.fixture()
def app(documents, fake_assistant, scheduler):
    return create_app(
        documents=documents,
        assistant=fake_assistant,
        word_translator=WordTranslator(DeepLClient(translator=FakeDeepLTranslator())),
        scheduler_factory=lambda: scheduler,
    )


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def story_id(client):
    resp = client.post("/api/stories", json={
        "title": "Der Hund",
        "original_story": "Der Hund läuft schnell.",
        "original_language": "de",
    })
    assert resp.status_code == 200
    return resp.json()["id"]


class TestAssistantEndpoint:
    def test_assess(self, client, fake_assistant):
        resp = client.post("/api/assistant", json={
            "action": "assess",
            "original_text": "Der Hund läuft schnell.",
            "user_translation": "The dog run fast.",
            "source_language": "de",
            "target_language": "en",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["score"] == 60
        assert data["new_translate"] is True
        assert fake_assistant.assess_calls[0][1] == "The dog run fast."

    def test_alternatives(self, client):
        resp = client.post("/api/assistant", json={
            "action": "alternatives",
            "original_text": "Der Hund läuft schnell.",
            "user_translation": "The dog runs fast.",
            "source_language": "de",
            "target_language": "en",
        })
        assert resp.status_code == 200
        assert len(resp.json()["alternatives"]) == 3

    def test_autocomplete_without_translation(self, client):
        resp = client.post("/api/assistant", json={
            "action": "autocomplete",
            "original_text": "Der Hund läuft schnell.",
            "source_language": "de",
            "target_language": "en",
        })
        assert resp.status_code == 200
        assert resp.json()["translation"] == "The dog runs fast. The cat sleeps."

    def test_assess_requires_translation(self, client):
        resp = client.post("/api/assistant", json={
            "action": "assess",
            "original_text": "Der Hund läuft schnell.",
            "source_language": "de",
            "target_language": "en",
        })
        assert resp.status_code == 400

    def test_invalid_action(self, client):
        resp = client.post("/api/assistant", json={
            "action": "summarize",
            "original_text": "Der Hund läuft schnell.",
            "user_translation": "The dog runs fast.",
            "source_language": "de",
            "target_language": "en",
        })
        assert resp.status_code == 400


class TestTranslateEndpoint:
    def test_translate_word(self, client):
        resp = client.post("/api/translate", json={"text": "Hund", "source_language": "de", "target_language": "en"})
        assert resp.status_code == 200
        assert resp.json() == {"original": "Hund", "translated": "dog"}

    def test_translate_failure(self, documents):
        app = create_app(
            documents=documents,
            assistant=FakeAssistant(),
            word_translator=WordTranslator(DeepLClient(translator=FakeDeepLTranslator(fail=True))),
        )
        resp = TestClient(app).post(
            "/api/translate", json={"text": "Hund", "source_language": "de", "target_language": "en"}
        )
        assert resp.status_code == 502
        assert resp.json() == {"error": "Error translating text"}


class TestStoryEndpoints:
    def test_get_and_list(self, client, story_id):
        assert client.get(f"/api/stories/{story_id}").json()["title"] == "Der Hund"
        assert [s["id"] for s in client.get("/api/stories").json()["stories"]] == [story_id]

    def test_missing_story(self, client):
        assert client.get("/api/stories/nope").status_code == 404

    def test_translations(self, client, story_id):
        resp = client.post(f"/api/stories/{story_id}/translations", json={"language": "en", "story": "The dog runs fast."})
        assert resp.status_code == 200

        resp = client.get(f"/api/stories/{story_id}/translations/en")
        assert resp.json()["story"] == "The dog runs fast."
        assert client.get(f"/api/stories/{story_id}/translations/fr").status_code == 404

    def test_translation_in_original_language_rejected(self, client, story_id):
        resp = client.post(f"/api/stories/{story_id}/translations", json={"language": "de", "story": "Der Hund."})
        assert resp.status_code == 400

    def test_delete(self, client, story_id):
        assert client.delete(f"/api/stories/{story_id}").status_code == 200
        assert client.get(f"/api/stories/{story_id}").status_code == 404


class TestDraftEndpoints:
    def test_draft_lifecycle(self, client, story_id):
        first = client.post(f"/api/stories/{story_id}/drafts", headers=USER, json={
            "content": "The dog runs.", "language": "en", "date": "2024-01-01T10:00:00.000Z",
        }).json()
        second = client.post(f"/api/stories/{story_id}/drafts", headers=USER, json={
            "content": "The dog runs fast.", "language": "en", "date": "2024-01-02T10:00:00.000Z",
        }).json()

        listed = client.get(f"/api/stories/{story_id}/drafts", headers=USER).json()["drafts"]
        assert [d["id"] for d in listed] == [second["id"], first["id"]]

        resp = client.get(f"/api/stories/{story_id}/drafts/{first['id']}", headers=USER)
        assert resp.json()["content"] == "The dog runs."

        assert client.delete(f"/api/stories/{story_id}/drafts/{first['id']}", headers=USER).status_code == 200
        assert client.get(f"/api/stories/{story_id}/drafts/{first['id']}", headers=USER).status_code == 404

        # Deleting again still succeeds
        resp = client.delete(f"/api/stories/{story_id}/drafts/{first['id']}", headers=USER)
        assert resp.json() == {"status": "deleted"}

    def test_drafts_are_per_user(self, client, story_id):
        client.post(f"/api/stories/{story_id}/drafts", headers=USER, json={"content": "Mine.", "language": "en"})

        assert client.get(f"/api/stories/{story_id}/drafts").json()["drafts"] == []

    def test_empty_draft_rejected(self, client, story_id):
        resp = client.post(f"/api/stories/{story_id}/drafts", headers=USER, json={"content": "  ", "language": "en"})
        assert resp.status_code == 400


class TestSessionEndpoints:
    def open_session(self, client, story_id, headers=USER):
        resp = client.post("/api/sessions", headers=headers, json={"story_id": story_id})
        assert resp.status_code == 200
        return resp.json()["session_id"]

    def test_typing_triggers_debounced_assessment(self, client, story_id, scheduler, fake_assistant):
        session_id = self.open_session(client, story_id)

        resp = client.post(f"/api/sessions/{session_id}/ai", json={"enabled": True})
        assert resp.json()["notice"]["title"] == "AI Mode Enabled"

        resp = client.put(f"/api/sessions/{session_id}/text", json={"text": "The dog run fast."})
        assert resp.json()["decision"] == "assess"
        assert fake_assistant.assess_calls == []

        scheduler.advance(1)

        state = client.get(f"/api/sessions/{session_id}").json()["state"]
        assert state["score"] == 60
        assert state["has_improved_translation"] is True

        resp = client.post(f"/api/sessions/{session_id}/apply", json={"improved": True})
        assert resp.json()["state"]["text"] == "The dog runs fast."

    def test_anonymous_reader_cannot_enable_ai(self, client, story_id):
        session_id = self.open_session(client, story_id, headers={})

        resp = client.post(f"/api/sessions/{session_id}/ai", json={"enabled": True})

        assert resp.json()["notice"]["title"] == "Login Required"
        assert resp.json()["state"]["ai_enabled"] is False

    def test_alternatives_and_apply(self, client, story_id):
        session_id = self.open_session(client, story_id)

        client.put(f"/api/sessions/{session_id}/text", json={"text": "The dog runs fast"})
        resp = client.post(f"/api/sessions/{session_id}/alternatives")
        assert resp.json()["notice"]["title"] == "Incomplete Translation"

        client.put(f"/api/sessions/{session_id}/text", json={"text": "The dog runs fast."})
        resp = client.post(f"/api/sessions/{session_id}/alternatives")
        assert resp.json()["notice"] is None
        assert resp.json()["state"]["alternatives"] == ["The dog sprints.", "The hound runs quickly."]

        resp = client.post(f"/api/sessions/{session_id}/apply", json={"alternative_index": 0})
        assert resp.json()["state"]["text"] == "The dog sprints."

        resp = client.post(f"/api/sessions/{session_id}/apply", json={"alternative_index": 7})
        assert resp.status_code == 409

    def test_refresh_assessment(self, client, story_id, fake_assistant):
        session_id = self.open_session(client, story_id)
        client.put(f"/api/sessions/{session_id}/text", json={"text": "Dog"})

        resp = client.post(f"/api/sessions/{session_id}/assess")

        assert resp.json()["state"]["last_assessed_text"] == "Dog"
        assert len(fake_assistant.assess_calls) == 1

    def test_save_session_draft(self, client, story_id):
        session_id = self.open_session(client, story_id)
        client.put(f"/api/sessions/{session_id}/text", json={"text": "The dog runs fast."})

        resp = client.post(f"/api/sessions/{session_id}/drafts")
        assert resp.status_code == 200
        assert resp.json()["language"] == "en"

        drafts = client.get(f"/api/stories/{story_id}/drafts", headers=USER).json()["drafts"]
        assert [d["content"] for d in drafts] == ["The dog runs fast."]

    def test_close_session(self, client, story_id):
        session_id = self.open_session(client, story_id)

        assert client.delete(f"/api/sessions/{session_id}").status_code == 200
        assert client.get(f"/api/sessions/{session_id}").status_code == 404

    def test_session_for_missing_story(self, client):
        resp = client.post("/api/sessions", json={"story_id": "nope"})
        assert resp.status_code == 404


class TestSessionLanguagesAndDrafts:
    def open_session(self, client, story_id):
        resp = client.post("/api/sessions", headers=USER, json={"story_id": story_id})
        return resp.json()["session_id"]

    def test_switch_displayed_original(self, client, story_id):
        client.post(f"/api/stories/{story_id}/translations", json={"language": "en", "story": "The dog runs fast."})
        session_id = self.open_session(client, story_id)

        resp = client.put(f"/api/sessions/{session_id}/languages", json={"original_language": "en"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["original_text"] == "The dog runs fast."
        assert data["original_language"] == "en"
        assert data["translation_language"] != "en"

        resp = client.put(f"/api/sessions/{session_id}/languages", json={"translation_language": "en"})
        assert resp.status_code == 400

        resp = client.put(f"/api/sessions/{session_id}/languages", json={"original_language": "de", "translation_language": "en"})
        assert resp.json()["original_text"] == "Der Hund läuft schnell."
        assert resp.json()["translation_language"] == "en"

    def test_missing_translation_of_original(self, client, story_id):
        session_id = self.open_session(client, story_id)

        resp = client.put(f"/api/sessions/{session_id}/languages", json={"original_language": "fr"})

        assert resp.json()["original_text"] == "Translation not available for this language"

    def test_rejected_selection_changes_nothing(self, client, story_id):
        session_id = self.open_session(client, story_id)

        resp = client.put(f"/api/sessions/{session_id}/languages", json={"original_language": "tr", "translation_language": "tr"})
        assert resp.status_code == 400

        data = client.get(f"/api/sessions/{session_id}").json()
        assert data["original_language"] == "de"
        assert data["translation_language"] == "en"

    def test_load_saved_draft(self, client, story_id):
        draft = client.post(f"/api/stories/{story_id}/drafts", headers=USER, json={
            "content": "Köpek hızlı koşuyor.", "language": "tr",
        }).json()
        session_id = self.open_session(client, story_id)

        resp = client.post(f"/api/sessions/{session_id}/drafts/{draft['id']}/load")

        assert resp.status_code == 200
        assert resp.json()["state"]["text"] == "Köpek hızlı koşuyor."
        assert resp.json()["translation_language"] == "tr"

    def test_load_missing_draft(self, client, story_id):
        session_id = self.open_session(client, story_id)

        resp = client.post(f"/api/sessions/{session_id}/drafts/nope/load")

        assert resp.status_code == 404


class TestWithoutOpenAIKey:
    @pytest.fixture()
    def unconfigured_client(self, documents, scheduler, monkeypatch):
        from storylingo.config import config

        monkeypatch.setattr(config, "openai_api_key", "")
        app = create_app(documents=documents, scheduler_factory=lambda: scheduler)
        return TestClient(app)

    def test_sessions_open_without_assistant(self, unconfigured_client):
        story_id = unconfigured_client.post("/api/stories", json={
            "title": "Der Hund", "original_story": "Der Hund läuft schnell.", "original_language": "de",
        }).json()["id"]

        resp = unconfigured_client.post("/api/sessions", headers=USER, json={"story_id": story_id})
        assert resp.status_code == 200
        session_id = resp.json()["session_id"]

        unconfigured_client.put(f"/api/sessions/{session_id}/text", json={"text": "The dog runs fast."})
        state = unconfigured_client.post(f"/api/sessions/{session_id}/assess").json()["state"]

        assert state["score"] == 0
        assert state["feedback"] == "Error assessing translation"

    def test_assistant_endpoint_reports_unavailable(self, unconfigured_client):
        resp = unconfigured_client.post("/api/assistant", json={
            "action": "assess",
            "original_text": "Der Hund läuft schnell.",
            "user_translation": "The dog runs fast.",
            "source_language": "de",
            "target_language": "en",
        })

        assert resp.status_code == 503
