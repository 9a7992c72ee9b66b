"""Service de résumé: résumé, titre et tags générés par un modèle de langage.

Le service est injecté dans EnrichmentPipeline (voir create_app); toute
défaillance est remontée sous la forme d'un ServiceError générique.
"""
import logging
from typing import Optional, Protocol

from openai import OpenAI, OpenAIError

from noteai.common.errors import ServiceError

logger = logging.getLogger(__name__)

SUMMARY_SYSTEM_PROMPT = (
    "You are a helpful assistant that creates clear, concise summaries of text content. "
    "Focus on extracting the most important information and presenting it in an organized manner."
)
TITLE_SYSTEM_PROMPT = (
    "You are a helpful assistant that generates concise, descriptive titles for text content."
)
TAGS_SYSTEM_PROMPT = (
    "You are a helpful assistant that extracts relevant tags from text content. "
    "Return only the tags separated by commas."
)


class Summarizer(Protocol):
    def summarize(self, text: str, model: str) -> str: ...

    def generate_title(self, text: str) -> str: ...

    def extract_tags(self, text: str) -> list: ...


class OpenAISummarizer:
    def __init__(self, client: OpenAI, utility_model: str = "gpt-3.5-turbo", temperature: float = 0.3):
        self.client = client
        self.utility_model = utility_model
        self.temperature = temperature

    def _complete(self, model: str, system: str, prompt: str, max_tokens: int) -> str:
        try:
            resp = self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=max_tokens,
                temperature=self.temperature,
            )
        except OpenAIError as e:
            logger.error("openai_call_failed", extra={"model": model, "error": str(e)})
            raise ServiceError(f"Summarization service failed: {e.__class__.__name__}.") from e

        out = (resp.choices[0].message.content or "").strip() if resp.choices else ""
        if not out:
            raise ServiceError("Summarization service returned an empty answer.")
        return out

    def summarize(self, text: str, model: str) -> str:
        prompt = (
            "Please provide a concise and well-structured summary of the following text. "
            "Focus on the key points and main ideas. Keep the summary clear and easy to understand.\n\n"
            f"Text to summarize:\n{text}\n\n"
            "Please provide a summary that is approximately 20-30% of the original length."
        )
        return self._complete(model, SUMMARY_SYSTEM_PROMPT, prompt, max_tokens=500)

    def generate_title(self, text: str) -> str:
        prompt = (
            "Generate a concise and descriptive title (maximum 60 characters) "
            f"for the following text:\n\n{text}\n\nTitle:"
        )
        return self._complete(self.utility_model, TITLE_SYSTEM_PROMPT, prompt, max_tokens=20)

    def extract_tags(self, text: str) -> list:
        prompt = (
            "Extract 3-5 relevant tags from the following text. "
            f"Return only the tags separated by commas, no additional text:\n\n{text}"
        )
        answer = self._complete(self.utility_model, TAGS_SYSTEM_PROMPT, prompt, max_tokens=50)
        return [t.strip() for t in answer.split(",")]


class UnavailableSummarizer:
    """Utilisé quand aucune clé API n'est configurée: chaque appel échoue."""

    def _fail(self, *args, **kwargs):
        raise ServiceError("Summarization service is not configured.")

    summarize = _fail
    generate_title = _fail
    extract_tags = _fail


def build_summarizer(config) -> Summarizer:
    api_key: Optional[str] = config.get("OPENAI_API_KEY")
    if not api_key:
        logger.warning("openai_api_key_missing")
        return UnavailableSummarizer()

    # pas de retry automatique: un échec doit remonter tel quel
    client_kwargs = {"api_key": api_key, "max_retries": 0}
    if config.get("OPENAI_BASE_URL"):
        client_kwargs["base_url"] = config["OPENAI_BASE_URL"]
    if config.get("OPENAI_TIMEOUT_SECONDS"):
        client_kwargs["timeout"] = config["OPENAI_TIMEOUT_SECONDS"]

    return OpenAISummarizer(
        OpenAI(**client_kwargs),
        utility_model=config.get("AI_UTILITY_MODEL", "gpt-3.5-turbo"),
    )
