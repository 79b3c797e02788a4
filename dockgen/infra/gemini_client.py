# -----------------------------------------------------------------------------
# GEMINI CLIENT - TEXT COMPLETION BACKEND
# -----------------------------------------------------------------------------
# Responsibility: Send one prompt to the Gemini generateContent REST API and
# return the text of the first candidate.
#
# Authentication: API key in the x-goog-api-key header (GEMINI_API_KEY).
# The generator only knows the TextCompleter protocol; this is one
# implementation of it.
# -----------------------------------------------------------------------------

from typing import Optional, Protocol

import requests
from rich.console import Console

from dockgen.domain.errors import CompletionError

console = Console()

REQUEST_TIMEOUT_SECONDS = 60


class TextCompleter(Protocol):
    """A fallible prompt -> text service."""

    def complete(self, prompt: str) -> str:
        ...


class GeminiCompleter:
    """
    Thin requests-based client for Gemini.

    Why not the SDK: one endpoint, one call; requests keeps the
    dependency stack small and is trivially mocked in tests.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        endpoint: str,
    ) -> None:
        """
        Args:
            api_key: Gemini API key.
            model: Model name, e.g. "gemini-2.5-flash".
            endpoint: Base URL of the Generative Language API.

        Raises:
            CompletionError: If no API key is available.
        """
        self._api_key = api_key
        self._model = model
        self._endpoint = endpoint.rstrip("/")

        if not self._api_key:
            raise CompletionError("GEMINI_API_KEY not configured")

    @property
    def model(self) -> str:
        return self._model

    def complete(self, prompt: str) -> str:
        """
        Return the completion text for `prompt`.

        Raises:
            CompletionError: On transport errors, non-200 responses or an
                             unexpected response shape.
        """
        url = f"{self._endpoint}/models/{self._model}:generateContent"
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self._api_key,
        }
        body = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}

        try:
            response = requests.post(url, headers=headers, json=body, timeout=REQUEST_TIMEOUT_SECONDS)
        except requests.RequestException as e:
            console.print(f"[red][GEMINI] Request failed: {e}[/red]")
            raise CompletionError(f"Gemini request failed: {e}") from e

        if response.status_code != 200:
            console.print(f"[red][GEMINI] API error: {response.status_code}[/red]")
            raise CompletionError(f"Gemini API error: {response.status_code} - {response.text[:500]}")

        try:
            parts = response.json()["candidates"][0]["content"]["parts"]
            text = "".join(part.get("text", "") for part in parts)
        except (ValueError, KeyError, IndexError, TypeError) as e:
            console.print("[red][GEMINI] Unexpected response format[/red]")
            raise CompletionError(f"Unexpected Gemini response: {e}") from e

        console.print(f"[cyan][GEMINI] Completion received ({len(text)} chars)[/cyan]")
        return text
