"""FastAPI application for the StoryLingo reader and admin API."""

import uvicorn
from typing import Callable, Optional
from fastapi import FastAPI

from ..assistant.session import AssistantClient
from ..assistant.timers import AsyncioScheduler, Scheduler
from ..config import config
from ..storage.document_store import JsonFileDocumentStore, MemoryDocumentStore
from ..storage.draft_store import DraftStore
from ..storage.story_store import StoryStore
from ..translation.word_translator import WordTranslator
from .routes import api
from .services.session_manager import SessionManager


def create_app(
    documents: Optional[MemoryDocumentStore] = None,
    assistant: Optional[AssistantClient] = None,
    word_translator: Optional[WordTranslator] = None,
    scheduler_factory: Optional[Callable[[], Scheduler]] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        documents: Document store (defaults to a JSON file under the data dir)
        assistant: LLM assistant client (built from config on first use if not provided)
        word_translator: Word translator (built from config on first use if not provided)
        scheduler_factory: Builds the debounce scheduler for each new session
            (defaults to the running event loop)
    """
    app = FastAPI(
        title="StoryLingo",
        description="Bilingual story reader with AI translation assistant",
        version="0.1.0",
    )

    documents = documents if documents is not None else JsonFileDocumentStore(config.data_dir)

    # Store services in app state
    app.state.documents = documents
    app.state.draft_store = DraftStore(documents)
    app.state.story_store = StoryStore(documents)
    app.state.session_manager = SessionManager(config.thresholds)
    app.state.assistant = assistant
    app.state.word_translator = word_translator
    app.state.scheduler_factory = scheduler_factory or AsyncioScheduler

    # Include routers
    app.include_router(api.router, prefix="/api")

    return app


def main():
    """Entry point for the storylingo-web command."""
    import argparse

    parser = argparse.ArgumentParser(description="Run the StoryLingo web API")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    print(f"Starting StoryLingo at http://{args.host}:{args.port}")
    uvicorn.run(
        "storylingo.web.app:create_app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        factory=True,
    )


if __name__ == "__main__":
    main()
