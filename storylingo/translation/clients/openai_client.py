"""OpenAI client for assessing readers' translations and suggesting alternatives."""

import json
from typing import List, Optional
from openai import OpenAI

from ...config import config, LANGUAGE_NAMES
from ...log import get_logger
from ...models.assessment import AssessmentResult

logger = get_logger("storylingo.openai")


ASSESSMENT_SYSTEM_PROMPT = """You are an expert language translator. Your task is to evaluate the quality of a translation.
Compare the original text with the user's translation and provide a JSON response with the following format:
{
  "score": <number between 0-100>,
  "feedback": "<brief feedback on what could be improved>",
  "new_translate": <boolean - true if translation needs significant improvement>,
  "translation": "<improved translation if new_translate is true, otherwise null>"
}

IMPORTANT GUIDELINES:
1. If the user's translation is incomplete (only a portion of the original text), only evaluate the portion they've attempted to translate.
2. Only set new_translate to true when there are significant issues with accuracy, fluency, or meaning preservation.
3. When providing an improved translation, only translate up to the point the user has translated, not the entire original text.
4. Consider the context and language-specific nuances when evaluating.
5. Be more lenient with partial translations that end with punctuation (., ,) as they likely represent work in progress.
6. If the user's translation appears to be incomplete (cutting off mid-sentence or containing substantially less content than the corresponding part of the original text), set new_translate to false and DO NOT provide any alternative translation.
7. Only suggest a complete alternative when the user has provided a complete sentence or logical segment that can be properly evaluated.
8. When in doubt about completeness, err on the side of not providing an alternative translation.

Example: If the original text has 3 sentences but the user has only translated 1 sentence and it ends with a period, only assess that 1 completed sentence."""


ALTERNATIVES_SYSTEM_PROMPT = """You are an expert language translator. Your task is to provide alternative translations for the given text.
The user has provided their own translation, but is looking for alternatives that:
1. Preserve the original meaning
2. May use different vocabulary or sentence structure
3. Sound natural in the target language

RESPONSE FORMAT (JSON only):
{
  "alternatives": ["<alternative 1>", "<alternative 2>"]
}

IMPORTANT GUIDELINES:
1. Only generate alternatives for the specific portion of the original text that the user has attempted to translate.
2. If the user's translation ends with a period, assume it's a complete sentence and provide alternatives for that sentence.
3. If the user's translation ends with a comma, only provide alternatives up to that natural break.
4. Provide exactly 2 alternatives that are meaningfully different from each other and from the user's translation.
5. If a high-quality alternative isn't possible, provide fewer.
6. Maintain the same level of formality and style as the user's translation."""


class OpenAIAssistantClient:
    """Scores translations, proposes alternatives and completes partial translations with GPT."""

    def __init__(
        self,
        client: Optional[OpenAI] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_alternatives: Optional[int] = None,
    ):
        """
        Initialize the assistant client.

        Args:
            client: Pre-built OpenAI client. If not provided, one is created from the API key.
            api_key: OpenAI API key. If not provided, uses OPENAI_API_KEY from environment.
            model: Chat model name (defaults to the configured model)
            max_alternatives: Maximum number of alternatives returned
        """
        if client is None:
            api_key = api_key or config.openai_api_key
            if not api_key:
                raise ValueError("OpenAI API key is required")
            client = OpenAI(api_key=api_key)
        self.client = client
        self.model = model or config.openai_model
        self.max_tokens = config.max_tokens
        self.max_alternatives = (
            max_alternatives if max_alternatives is not None else config.thresholds.max_alternatives
        )

    def assess_translation(
        self,
        original_text: str,
        user_translation: str,
        source_lang: str,
        target_lang: str,
    ) -> AssessmentResult:
        """
        Score a reader's translation.

        Args:
            original_text: Text being translated
            user_translation: The reader's translation so far
            source_lang: Language code of the original text
            target_lang: Language code of the translation

        Returns:
            AssessmentResult; a zero-score result if the call or parsing fails
        """
        user_prompt = self._build_user_prompt(
            original_text,
            user_translation,
            source_lang,
            target_lang,
            "Evaluate this translation and provide the JSON response as specified.",
        )

        try:
            result_text = self._complete_json(
                ASSESSMENT_SYSTEM_PROMPT,
                user_prompt,
                config.assessment_temperature,
            )
        except Exception:
            logger.exception("Error assessing translation", extra={"component": "openai", "action": "assess"})
            return AssessmentResult.failed("Error assessing translation")

        try:
            data = json.loads(result_text or "{}")
            if not isinstance(data, dict):
                raise ValueError("Assessment response is not a JSON object")
        except ValueError:
            logger.warning("Unparseable assessment response", extra={"component": "openai", "detail": result_text})
            return AssessmentResult.failed("Error processing assessment")

        result = AssessmentResult.from_payload(data)
        logger.info("Translation assessed", extra={"component": "openai", "score": result.score})
        return result

    def get_alternative_translations(
        self,
        original_text: str,
        user_translation: str,
        source_lang: str,
        target_lang: str,
    ) -> List[str]:
        """
        Propose alternative phrasings of the reader's translation.

        Returns:
            At most ``max_alternatives`` strings in the model's order; empty on failure
        """
        user_prompt = self._build_user_prompt(
            original_text,
            user_translation,
            source_lang,
            target_lang,
            f"Please provide exactly {self.max_alternatives} alternative translations "
            "only for the part that the user has translated.",
        )

        try:
            result_text = self._complete_json(
                ALTERNATIVES_SYSTEM_PROMPT,
                user_prompt,
                config.alternatives_temperature,
            )
            data = json.loads(result_text or "{}")
        except Exception:
            logger.exception("Error generating alternatives", extra={"component": "openai", "action": "alternatives"})
            return []

        alternatives = data.get("alternatives") if isinstance(data, dict) else None
        if not isinstance(alternatives, list):
            return []
        return [alt for alt in alternatives if isinstance(alt, str) and alt.strip()][: self.max_alternatives]

    def autocomplete_translation(
        self,
        original_text: str,
        partial_translation: str,
        source_lang: str,
        target_lang: str,
    ) -> str:
        """Complete a partial translation; returns the partial text unchanged on failure."""
        source_name = LANGUAGE_NAMES.get(source_lang.lower(), source_lang)
        target_name = LANGUAGE_NAMES.get(target_lang.lower(), target_lang)
        system_prompt = (
            f"You are an expert language translator from {source_name} to {target_name}. "
            "Complete the partial translation provided by the user in a natural way, "
            "preserving the meaning from the original text. Only provide the completed translation."
        )
        user_prompt = (
            f"Original text ({source_lang}): {original_text}\n"
            f"Partial translation ({target_lang}): {partial_translation}\n\n"
            "Please complete the translation in a natural way."
        )

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=config.assessment_temperature,
                max_tokens=self.max_tokens,
            )
            completed = response.choices[0].message.content
        except Exception:
            logger.exception("Error auto-completing translation", extra={"component": "openai", "action": "autocomplete"})
            return partial_translation

        return completed.strip() if completed and completed.strip() else partial_translation

    def _complete_json(self, system_prompt: str, user_prompt: str, temperature: float) -> str:
        """Run a chat completion constrained to a JSON object."""
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=self.max_tokens,
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content
        return content.strip() if content else ""

    def _build_user_prompt(
        self,
        original_text: str,
        user_translation: str,
        source_lang: str,
        target_lang: str,
        instruction: str,
    ) -> str:
        """Build the user prompt shared by assessment and alternatives."""
        return (
            f"Original text ({source_lang}): {original_text}\n"
            f"User translation ({target_lang}): {user_translation}\n\n"
            f"{instruction}"
        )
