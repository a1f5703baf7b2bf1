"""External translation and language-model clients."""

from .deepl_client import DeepLClient
from .openai_client import OpenAIAssistantClient

__all__ = ["DeepLClient", "OpenAIAssistantClient"]
