"""Shared fixtures for the StoryLingo test suite."""
from types import SimpleNamespace

import pytest

from storylingo.config import AssistantThresholds
from storylingo.models.assessment import AssessmentResult
from storylingo.models.story import Story
from storylingo.storage.document_store import MemoryDocumentStore


class ManualHandle:
    def __init__(self, when, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Virtual clock: callbacks only run when the test advances time."""

    def __init__(self):
        self.now = 0.0
        self.handles = []

    def call_later(self, delay, callback):
        handle = ManualHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self):
        return [h for h in self.handles if not h.cancelled and not h.fired]

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = sorted((h for h in self.pending if h.when <= target), key=lambda h: h.when)
            if not due:
                break
            handle = due[0]
            self.now = handle.when
            handle.fired = True
            handle.callback()
        self.now = target


class FakeAssistant:
    """Records assistant calls and returns canned answers."""

    def __init__(self, result=None, alternatives=None, completion=None):
        self.result = result or AssessmentResult(score=85, feedback="Good")
        self.alternatives = alternatives if alternatives is not None else []
        self.completion = completion
        self.assess_calls = []
        self.alternatives_calls = []

    def assess_translation(self, original_text, user_translation, source_lang, target_lang):
        self.assess_calls.append((original_text, user_translation, source_lang, target_lang))
        return self.result

    def get_alternative_translations(self, original_text, user_translation, source_lang, target_lang):
        self.alternatives_calls.append((original_text, user_translation, source_lang, target_lang))
        return list(self.alternatives)

    def autocomplete_translation(self, original_text, partial_translation, source_lang, target_lang):
        return self.completion or partial_translation


def fake_chat_client(content=None, error=None):
    """Stand-in for openai.OpenAI exposing chat.completions.create."""
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        if error is not None:
            raise error
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    client.calls = calls
    return client


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def thresholds():
    return AssistantThresholds()


@pytest.fixture()
def assistant():
    return FakeAssistant()


@pytest.fixture()
def documents():
    return MemoryDocumentStore()


@pytest.fixture()
def story():
    return Story(
        id="story-1",
        title="Der Hund",
        original_story="Der Hund läuft schnell. Die Katze schläft.",
        original_language="de",
    )
