"""DeepL API client for word and phrase translation."""

import deepl
from typing import Optional

from ...config import config


class DeepLClient:
    """Client for DeepL translation API."""

    # Target languages DeepL only accepts with a regional variant
    TARGET_LANGUAGE_MAP = {
        "en": "EN-US",
        "pt": "PT-PT",
    }

    def __init__(self, api_key: Optional[str] = None, translator: Optional[deepl.Translator] = None):
        """
        Initialize the DeepL client.

        Args:
            api_key: DeepL API key. If not provided, uses DEEPL_API_KEY from environment.
            translator: Pre-built deepl.Translator (skips key lookup)
        """
        if translator is None:
            api_key = api_key or config.deepl_api_key
            if not api_key:
                raise ValueError("DeepL API key is required")
            translator = deepl.Translator(api_key)
        self.translator = translator

    def translate(
        self,
        text: str,
        target_lang: str,
        source_lang: Optional[str] = None,
    ) -> str:
        """
        Translate a single text.

        Args:
            text: Text to translate
            target_lang: Target language code (e.g., "de", "tr")
            source_lang: Source language code (auto-detect if not provided)

        Returns:
            The translated text
        """
        target = self.TARGET_LANGUAGE_MAP.get(target_lang.lower(), target_lang.upper())

        kwargs = {
            "text": text,
            "target_lang": target,
            "preserve_formatting": True,
        }

        # Source languages never take a regional variant
        if source_lang:
            kwargs["source_lang"] = source_lang.split("-")[0].upper()

        result = self.translator.translate_text(**kwargs)

        return result.text

