"""Translation backends used by the document pipeline."""

from __future__ import annotations

import asyncio
import json
import os
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import httpx
from dotenv import find_dotenv, load_dotenv
from openai import APIError, AsyncOpenAI, RateLimitError

from .errors import TranslationServiceError
from .utils import get_language_name

# Load environment variables from .env file in current working directory
load_dotenv(find_dotenv(usecwd=True))

# Backend configuration - can be overridden via environment variables or .env file
LIBRETRANSLATE_URL = os.environ.get("LIBRETRANSLATE_URL", "https://translate.fedilab.app/")
LIBRETRANSLATE_API_KEY = os.environ.get("LIBRETRANSLATE_API_KEY", "")
TRANSLATION_MODEL = os.environ.get("OPENAI_TRANSLATION_MODEL", "gpt-5-mini")
REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "30.0"))

# Rate limiting configuration
MAX_CONCURRENT_REQUESTS = int(os.environ.get("MAX_CONCURRENT_REQUESTS", "10"))
INITIAL_RETRY_DELAY = float(os.environ.get("INITIAL_RETRY_DELAY", "1.0"))
MAX_BACKOFF_RESETS = int(os.environ.get("MAX_BACKOFF_RESETS", "5"))

# Backoff thresholds (in seconds)
MAX_DELAY = 64  # Reset backoff after reaching this delay
RESET_DELAY = 16  # Delay to reset to after hitting MAX_DELAY

BACKENDS = ("libretranslate", "openai")


@runtime_checkable
class Translator(Protocol):
    """Anything that can translate one string into one target language."""

    async def translate(self, text: str, target_language: str) -> str:
        """Return `text` translated to `target_language` or raise TranslationServiceError."""
        ...


class _RateLimited(Exception):
    """HTTP 429 from a backend that is not the OpenAI SDK."""

    def __init__(self, retry_after: str | None = None):
        super().__init__("Rate limited")
        self.retry_after = retry_after


_RATE_LIMIT_ERRORS = (RateLimitError, _RateLimited)


async def _api_call_with_retry(semaphore: asyncio.Semaphore, api_call_func, *args, **kwargs):
    """
    Execute an API call with rate limiting and exponential backoff retry.

    Backoff pattern: 1 -> 2 -> 4 -> 8 -> 16 -> 32 -> 64 -> 16 -> 32 -> 64 -> ...
    Resets to 16s after hitting 64s. Times out after MAX_BACKOFF_RESETS resets
    (approximately 10 minutes with default settings).

    Args:
        semaphore: Limits how many calls are in flight at once
        api_call_func: The async function to call
        *args, **kwargs: Arguments to pass to the function

    Returns:
        The result of the API call

    Raises:
        RateLimitError, _RateLimited: If all retries are exhausted after MAX_BACKOFF_RESETS resets
    """
    delay = INITIAL_RETRY_DELAY
    reset_count = 0
    attempt = 0

    while True:
        async with semaphore:
            try:
                return await api_call_func(*args, **kwargs)
            except _RATE_LIMIT_ERRORS as e:
                attempt += 1

                if reset_count >= MAX_BACKOFF_RESETS:
                    print(f"Rate limit retry timeout after {reset_count} backoff resets (~{MAX_BACKOFF_RESETS * 112}s)")
                    raise

                # Honour retry-after when the backend sends one
                wait_time = delay
                retry_after = getattr(e, "retry_after", None)
                if retry_after:
                    try:
                        wait_time = float(retry_after)
                    except ValueError:
                        pass

                print(f"Rate limited, waiting {wait_time:.1f}s (attempt {attempt}, reset {reset_count}/{MAX_BACKOFF_RESETS})...")

        # Sleep outside the semaphore so other calls can proceed
        await asyncio.sleep(wait_time)

        delay *= 2
        if delay > MAX_DELAY:
            delay = RESET_DELAY
            reset_count += 1


@dataclass
class Language:
    """A language supported by a LibreTranslate server."""

    code: str
    name: str
    targets: list[str] = field(default_factory=list)


class LibreTranslateTranslator:
    """
    Translator backed by a LibreTranslate server.

    The source language is always auto-detected by the server.
    """

    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        max_concurrent_requests: int | None = None,
    ):
        base_url = base_url or LIBRETRANSLATE_URL
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.api_key = api_key if api_key is not None else LIBRETRANSLATE_API_KEY
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else REQUEST_TIMEOUT
        )
        self._max_concurrent_requests = max_concurrent_requests or MAX_CONCURRENT_REQUESTS
        self._semaphore: asyncio.Semaphore | None = None

    def _get_semaphore(self) -> asyncio.Semaphore:
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self._max_concurrent_requests)
        return self._semaphore

    async def _post_translate(self, params: dict[str, str]) -> httpx.Response:
        response = await self._client.post(self.base_url + "translate", params=params)
        if response.status_code == 429:
            raise _RateLimited(response.headers.get("retry-after"))
        return response

    async def translate(self, text: str, target_language: str) -> str:
        params = {"q": text, "source": "auto", "target": target_language}
        if self.api_key:
            params["api_key"] = self.api_key

        try:
            response = await _api_call_with_retry(
                self._get_semaphore(), self._post_translate, params
            )
            response.raise_for_status()
        except _RateLimited as e:
            raise TranslationServiceError(f"LibreTranslate rate limit exceeded: {e}", text) from e
        except httpx.HTTPError as e:
            raise TranslationServiceError(f"LibreTranslate request failed: {e}", text) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise TranslationServiceError(f"LibreTranslate returned invalid JSON: {e}", text) from e

        translated = payload.get("translatedText") if isinstance(payload, dict) else None
        if not isinstance(translated, str):
            raise TranslationServiceError(
                "LibreTranslate response has no 'translatedText' string", text
            )
        return translated

    async def get_languages(self) -> list[Language]:
        """List the languages the server can translate between."""
        try:
            response = await self._client.get(self.base_url + "languages")
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise TranslationServiceError(f"Could not list LibreTranslate languages: {e}") from e
        except ValueError as e:
            raise TranslationServiceError(f"LibreTranslate returned invalid JSON: {e}") from e

        if not isinstance(payload, list):
            raise TranslationServiceError("LibreTranslate languages response is not a list")

        return [
            Language(
                code=item["code"],
                name=item.get("name", item["code"]),
                targets=list(item.get("targets", [])),
            )
            for item in payload
            if isinstance(item, dict) and "code" in item
        ]

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> LibreTranslateTranslator:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def _get_client() -> AsyncOpenAI:
    """Get async OpenAI client."""
    api_key = os.environ.get("OPENAI_API_KEY")
    if not api_key:
        raise ValueError(
            "OPENAI_API_KEY environment variable not set. "
            "Set it in your environment or in a .env file."
        )
    return AsyncOpenAI(api_key=api_key)


class OpenAITranslator:
    """
    Translator backed by an OpenAI chat model.

    Uses Structured Outputs so every response is a JSON object with a
    single "translation" string.
    """

    _SCHEMA = {
        "type": "object",
        "properties": {"translation": {"type": "string"}},
        "required": ["translation"],
        "additionalProperties": False,
    }

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        model: str | None = None,
        context: str = "",
        max_concurrent_requests: int | None = None,
    ):
        self._client = client or _get_client()
        self.model = model or TRANSLATION_MODEL
        self.context = context
        self._max_concurrent_requests = max_concurrent_requests or MAX_CONCURRENT_REQUESTS
        self._semaphore: asyncio.Semaphore | None = None

    def _get_semaphore(self) -> asyncio.Semaphore:
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self._max_concurrent_requests)
        return self._semaphore

    def _system_content(self, target_language: str) -> str:
        return f"""You are a helpful assistant that translates text to {target_language}. The text to translate is provided as JSON. You provide the output as JSON with the translated text in the "translation" field.

Rules:
- Detect the source language automatically
- When you encounter values enclosed in braces like '{{variable_name}}', keep the variable name unchanged. The placeholder position can change to fit the target language grammar.
- If the text is already in {target_language}, return it unchanged

{self.context}"""

    async def translate(self, text: str, target_language: str) -> str:
        try:
            language_name = get_language_name(target_language)
        except ValueError:
            language_name = target_language

        prompt = f"Translate the following JSON to {language_name}:\n```\n{json.dumps({'text': text}, ensure_ascii=False)}\n```\n"

        try:
            response = await _api_call_with_retry(
                self._get_semaphore(),
                self._client.chat.completions.create,
                model=self.model,
                messages=[
                    {"role": "system", "content": self._system_content(language_name)},
                    {"role": "user", "content": prompt},
                ],
                response_format={
                    "type": "json_schema",
                    "json_schema": {"name": "translation_output", "schema": self._SCHEMA, "strict": True},
                },
            )
        except APIError as e:
            raise TranslationServiceError(f"OpenAI request failed: {e}", text) from e

        # Handle refusals
        message = response.choices[0].message
        if getattr(message, "refusal", None):
            raise TranslationServiceError(f"Model refused to translate: {message.refusal}", text)

        if response.choices[0].finish_reason == "length":
            raise TranslationServiceError("Response was truncated due to length limit", text)

        try:
            translation = json.loads(message.content)["translation"]
        except (TypeError, KeyError, json.JSONDecodeError) as e:
            raise TranslationServiceError(f"Unable to decode model response: {e}", text) from e

        if not isinstance(translation, str):
            raise TranslationServiceError("Model response 'translation' is not a string", text)
        return translation


def create_translator(backend: str = "libretranslate", **kwargs) -> Translator:
    """
    Build a translator for the named backend.

    Args:
        backend: One of "libretranslate" or "openai"
        **kwargs: Passed to the backend's constructor

    Raises:
        ValueError: If the backend name is unknown
    """
    if backend == "libretranslate":
        return LibreTranslateTranslator(**kwargs)
    elif backend == "openai":
        return OpenAITranslator(**kwargs)
    raise ValueError(
        f"Invalid backend: '{backend}'. Valid options are: {', '.join(BACKENDS)}"
    )
