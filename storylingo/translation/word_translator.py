"""On-demand translation of words clicked in the original panel."""

from typing import Iterable

from ..log import get_logger
from ..models.story import WordSelection, WordTranslation
from .clients.deepl_client import DeepLClient

logger = get_logger("storylingo.words")

TRANSLATION_ERROR_TEXT = "Error translating text"


class TranslationServiceError(Exception):
    """The machine translation service could not translate the text."""


class WordTranslator:
    """Translates selected words and phrases through DeepL."""

    def __init__(self, deepl_client: DeepLClient):
        self.deepl = deepl_client

    def translate(self, text: str, source_lang: str, target_lang: str) -> WordTranslation:
        """
        Translate a word or phrase.

        Raises:
            TranslationServiceError: if the service call fails
        """
        try:
            translated = self.deepl.translate(text, target_lang=target_lang, source_lang=source_lang)
        except Exception as e:
            logger.exception("Word translation failed", extra={"component": "words"})
            raise TranslationServiceError(str(e)) from e
        return WordTranslation(original=text, translated=translated)

    def translate_selection(
        self,
        selections: Iterable[WordSelection],
        source_lang: str,
        target_lang: str,
    ) -> WordTranslation:
        """
        Translate the selected words in the order they appear in the text.

        Failures are rendered inline as "Error translating text" rather than raised.
        """
        ordered = sorted(selections, key=lambda s: s.index)
        phrase = " ".join(s.word for s in ordered)
        if not phrase:
            return WordTranslation(original="", translated="")
        try:
            return self.translate(phrase, source_lang, target_lang)
        except TranslationServiceError:
            return WordTranslation(original=phrase, translated=TRANSLATION_ERROR_TEXT)
