"""REST API routes."""

import asyncio
from dataclasses import asdict
from typing import Optional
from fastapi import APIRouter, FastAPI, Header, Request, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ...models.assessment import Notice
from ...storage.draft_store import anonymous_user_id
from ...translation.clients.deepl_client import DeepLClient
from ...translation.clients.openai_client import OpenAIAssistantClient
from ...translation.word_translator import (
    TRANSLATION_ERROR_TEXT,
    TranslationServiceError,
    WordTranslator,
)

router = APIRouter()


# Request/Response models
class AssistantRequest(BaseModel):
    action: str
    original_text: str
    user_translation: Optional[str] = None
    source_language: str
    target_language: str


class TranslateRequest(BaseModel):
    text: str
    source_language: str
    target_language: str


class CreateStoryRequest(BaseModel):
    title: str
    original_story: str
    original_language: str
    level: str = "beginner"


class AddStoryTranslationRequest(BaseModel):
    language: str
    story: str


class SaveDraftRequest(BaseModel):
    content: str
    language: str
    date: Optional[str] = None


class CreateSessionRequest(BaseModel):
    story_id: str
    translation_language: str = "en"


class UpdateTextRequest(BaseModel):
    text: str


class ToggleAIRequest(BaseModel):
    enabled: bool


class ApplyRequest(BaseModel):
    improved: bool = False
    alternative_index: Optional[int] = None


class SelectLanguagesRequest(BaseModel):
    original_language: Optional[str] = None
    translation_language: Optional[str] = None


def _build_assistant(app: FastAPI):
    """Assistant client from app state, built from config on first use."""
    if app.state.assistant is None:
        app.state.assistant = OpenAIAssistantClient()
    return app.state.assistant


def _get_assistant(request: Request):
    try:
        return _build_assistant(request.app)
    except ValueError:
        raise HTTPException(503, "AI assistant is not configured")


class DeferredAssistant:
    """Stands in for the assistant client until a session first calls it."""

    def __init__(self, app: FastAPI):
        self.app = app

    def assess_translation(self, *args):
        return _build_assistant(self.app).assess_translation(*args)

    def get_alternative_translations(self, *args):
        return _build_assistant(self.app).get_alternative_translations(*args)


def _get_word_translator(request: Request) -> WordTranslator:
    if request.app.state.word_translator is None:
        request.app.state.word_translator = WordTranslator(DeepLClient())
    return request.app.state.word_translator


def _resolve_user_id(request: Request, x_user_id: Optional[str]) -> str:
    """Logged-in readers send their id; everyone else gets an IP-derived one."""
    if x_user_id:
        return x_user_id
    client_ip = request.client.host if request.client else "127.0.0.1"
    return anonymous_user_id(client_ip)


def _notice_dict(notice: Optional[Notice]) -> Optional[dict]:
    return asdict(notice) if notice else None


# Assistant endpoints
@router.post("/assistant")
async def assistant_action(request: Request, body: AssistantRequest):
    """Run an AI assistant action: assess, alternatives or autocomplete."""
    if not body.action or not body.original_text or not body.source_language or not body.target_language:
        raise HTTPException(400, "Missing required fields")

    if body.action in ("assess", "alternatives") and not body.user_translation:
        raise HTTPException(400, "Missing user translation")

    assistant = _get_assistant(request)
    args = (body.original_text, body.user_translation or "", body.source_language, body.target_language)

    if body.action == "assess":
        result = await asyncio.to_thread(assistant.assess_translation, *args)
        return result.to_dict()

    if body.action == "alternatives":
        alternatives = await asyncio.to_thread(assistant.get_alternative_translations, *args)
        return {"alternatives": alternatives}

    if body.action == "autocomplete":
        completed = await asyncio.to_thread(assistant.autocomplete_translation, *args)
        return {"translation": completed}

    raise HTTPException(400, "Invalid action")


@router.post("/translate")
async def translate_text(request: Request, body: TranslateRequest):
    """Translate a word or phrase clicked in the original panel."""
    if not body.text or not body.source_language or not body.target_language:
        raise HTTPException(400, "Missing required fields")

    translator = _get_word_translator(request)
    try:
        result = await asyncio.to_thread(
            translator.translate,
            body.text,
            body.source_language,
            body.target_language,
        )
    except TranslationServiceError:
        return JSONResponse(status_code=502, content={"error": TRANSLATION_ERROR_TEXT})

    return {"original": result.original, "translated": result.translated}


# Story endpoints
@router.post("/stories")
async def create_story(request: Request, body: CreateStoryRequest):
    """Create a story (admin)."""
    story_store = request.app.state.story_store
    story = story_store.create_story(
        body.title,
        body.original_story,
        body.original_language,
        body.level,
    )
    return asdict(story)


@router.get("/stories")
async def list_stories(request: Request):
    """List all stories, newest first."""
    story_store = request.app.state.story_store
    return {"stories": [asdict(s) for s in story_store.list_stories()]}


@router.get("/stories/{story_id}")
async def get_story(request: Request, story_id: str):
    story_store = request.app.state.story_store

    story = story_store.get_story(story_id)
    if not story:
        raise HTTPException(404, "Story not found")

    return asdict(story)


@router.delete("/stories/{story_id}")
async def delete_story(request: Request, story_id: str):
    """Delete a story and its translations (admin)."""
    story_store = request.app.state.story_store

    if not story_store.delete_story(story_id):
        raise HTTPException(404, "Story not found")

    return {"status": "deleted"}


@router.post("/stories/{story_id}/translations")
async def add_story_translation(request: Request, story_id: str, body: AddStoryTranslationRequest):
    """Attach a translation to a story (admin)."""
    story_store = request.app.state.story_store

    story = story_store.get_story(story_id)
    if not story:
        raise HTTPException(404, "Story not found")
    if body.language == story.original_language:
        raise HTTPException(400, "Translation language must differ from the original language")

    translation = story_store.add_translation(story_id, body.language, body.story)
    return asdict(translation)


@router.get("/stories/{story_id}/translations/{language}")
async def get_story_translation(request: Request, story_id: str, language: str):
    story_store = request.app.state.story_store

    translation = story_store.get_translation(story_id, language)
    if not translation:
        raise HTTPException(404, "Translation not found")

    return asdict(translation)


# Draft endpoints
@router.get("/stories/{story_id}/drafts")
async def list_drafts(request: Request, story_id: str, x_user_id: Optional[str] = Header(None)):
    """List the reader's drafts for a story, newest first."""
    draft_store = request.app.state.draft_store
    user_id = _resolve_user_id(request, x_user_id)

    drafts = draft_store.list(story_id, user_id)
    return {"drafts": [asdict(d) for d in drafts]}


@router.post("/stories/{story_id}/drafts")
async def save_draft(
    request: Request,
    story_id: str,
    body: SaveDraftRequest,
    x_user_id: Optional[str] = Header(None),
):
    """Save a new draft."""
    draft_store = request.app.state.draft_store
    user_id = _resolve_user_id(request, x_user_id)

    if not body.content.strip():
        raise HTTPException(400, "Draft content is empty")

    draft = draft_store.create(story_id, user_id, body.content, body.language, body.date)
    return asdict(draft)


@router.get("/stories/{story_id}/drafts/{draft_id}")
async def get_draft(
    request: Request,
    story_id: str,
    draft_id: str,
    x_user_id: Optional[str] = Header(None),
):
    draft_store = request.app.state.draft_store
    user_id = _resolve_user_id(request, x_user_id)

    draft = draft_store.get(story_id, user_id, draft_id)
    if not draft:
        raise HTTPException(404, "Draft not found")

    return asdict(draft)


@router.delete("/stories/{story_id}/drafts/{draft_id}")
async def delete_draft(
    request: Request,
    story_id: str,
    draft_id: str,
    x_user_id: Optional[str] = Header(None),
):
    """Delete a draft. Deleting a missing draft succeeds."""
    draft_store = request.app.state.draft_store
    user_id = _resolve_user_id(request, x_user_id)

    draft_store.delete(story_id, user_id, draft_id)
    return {"status": "deleted"}


# Session endpoints
def _get_entry(request: Request, session_id: str):
    entry = request.app.state.session_manager.get_session(session_id)
    if not entry:
        raise HTTPException(404, "Session not found")
    return entry


def _session_payload(entry) -> dict:
    session = entry.session
    return {
        "session_id": entry.session_id,
        "story_id": session.story.id,
        "original_language": session.languages.original_language,
        "translation_language": session.target_language,
        "state": asdict(session.state),
    }


@router.post("/sessions")
async def create_session(
    request: Request,
    body: CreateSessionRequest,
    x_user_id: Optional[str] = Header(None),
):
    """Open a translation panel for a story."""
    story_store = request.app.state.story_store
    session_manager = request.app.state.session_manager

    story = story_store.get_story(body.story_id)
    if not story:
        raise HTTPException(404, "Story not found")

    entry = session_manager.create_session(
        story,
        user_id=_resolve_user_id(request, x_user_id),
        authenticated=bool(x_user_id),
        assistant=request.app.state.assistant or DeferredAssistant(request.app),
        scheduler=request.app.state.scheduler_factory(),
        translation_language=body.translation_language,
    )
    return _session_payload(entry)


@router.get("/sessions/{session_id}")
async def get_session(request: Request, session_id: str):
    return _session_payload(_get_entry(request, session_id))


@router.delete("/sessions/{session_id}")
async def close_session(request: Request, session_id: str):
    if not request.app.state.session_manager.close_session(session_id):
        raise HTTPException(404, "Session not found")
    return {"status": "closed"}


@router.put("/sessions/{session_id}/text")
async def update_text(request: Request, session_id: str, body: UpdateTextRequest):
    """Report the reader's current translation text (one call per change)."""
    entry = _get_entry(request, session_id)
    decision = entry.session.set_text(body.text)
    return {"decision": decision.value, **_session_payload(entry)}


@router.post("/sessions/{session_id}/ai")
async def toggle_ai(request: Request, session_id: str, body: ToggleAIRequest):
    """Switch AI mode on or off."""
    entry = _get_entry(request, session_id)

    notice = None
    if body.enabled:
        notice = entry.session.enable_ai(authenticated=entry.authenticated)
    else:
        entry.session.disable_ai()

    return {"notice": _notice_dict(notice), **_session_payload(entry)}


@router.post("/sessions/{session_id}/assess")
async def refresh_assessment(request: Request, session_id: str):
    """Assess the current text immediately."""
    entry = _get_entry(request, session_id)
    await asyncio.to_thread(entry.session.refresh_assessment)
    return _session_payload(entry)


@router.post("/sessions/{session_id}/alternatives")
async def request_alternatives(request: Request, session_id: str):
    """Fetch alternative phrasings of the current text."""
    entry = _get_entry(request, session_id)
    notice = await asyncio.to_thread(entry.session.request_alternatives)
    return {"notice": _notice_dict(notice), **_session_payload(entry)}


@router.post("/sessions/{session_id}/apply")
async def apply_suggestion(request: Request, session_id: str, body: ApplyRequest):
    """Apply the improved translation or one of the alternatives."""
    entry = _get_entry(request, session_id)

    if body.improved:
        applied = entry.session.apply_improved_translation()
    elif body.alternative_index is not None:
        applied = entry.session.apply_alternative(body.alternative_index)
    else:
        raise HTTPException(400, "Nothing to apply")

    if not applied:
        raise HTTPException(409, "Suggestion not available")

    return _session_payload(entry)


@router.post("/sessions/{session_id}/drafts")
async def save_session_draft(request: Request, session_id: str):
    """Save the session's current text as a draft."""
    entry = _get_entry(request, session_id)
    draft_store = request.app.state.draft_store

    try:
        draft = entry.session.save_draft(draft_store, entry.user_id)
    except ValueError as e:
        raise HTTPException(400, str(e))

    if draft is None:
        raise HTTPException(400, "Draft content is empty")

    return asdict(draft)


@router.post("/sessions/{session_id}/drafts/{draft_id}/load")
async def load_session_draft(request: Request, session_id: str, draft_id: str):
    """Put one of the reader's saved drafts back into the session."""
    entry = _get_entry(request, session_id)
    draft_store = request.app.state.draft_store

    draft = draft_store.get(entry.session.story.id, entry.user_id, draft_id)
    if not draft:
        raise HTTPException(404, "Draft not found")

    entry.session.load_draft(draft)
    return _session_payload(entry)


@router.put("/sessions/{session_id}/languages")
async def select_languages(request: Request, session_id: str, body: SelectLanguagesRequest):
    """Switch the displayed original and/or the translation language."""
    entry = _get_entry(request, session_id)
    session = entry.session

    if not session.select_languages(body.original_language, body.translation_language):
        raise HTTPException(400, "Translation language must differ from the displayed original language")

    original_text = session.languages.original_text(session.story, request.app.state.story_store)
    return {"original_text": original_text, **_session_payload(entry)}
