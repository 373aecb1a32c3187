"""
Client for interacting with an Ollama LLM server.

This client wraps HTTP requests to the Ollama REST API. It streams chat
completions from the ``/api/chat`` endpoint and yields the generated
text fragment by fragment. On error conditions (connection failures,
HTTP errors, malformed stream lines), a :class:`LLMError` is raised.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

import requests


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class LLMError(Exception):
    """Raised when communication with the LLM server fails."""

    pass


@dataclass
class OllamaClient:
    """Client for interacting with an Ollama server.

    Parameters
    ----------
    base_url : str
        Base URL of the Ollama server, e.g. ``"http://localhost"``.
    port : int
        Port number of the Ollama server, e.g. ``11434``.
    model : str
        Name of the model to use for generation, e.g. ``"llama3"``.
    request_timeout : float, optional
        Timeout in seconds for connecting and for each read. Defaults to
        60 seconds.
    max_tokens : int, optional
        Maximum number of tokens to generate. If provided, passed via
        the ``options`` payload.
    """

    base_url: str
    port: int
    model: str
    request_timeout: float = 60.0
    max_tokens: Optional[int] = None

    def _endpoint(self) -> str:
        return f"{self.base_url}:{self.port}/api/chat"

    def _payload(self, system: str, content: str) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": content},
            ],
            "stream": True,
        }
        options: Dict[str, Any] = {}
        if self.max_tokens is not None:
            options["num_predict"] = self.max_tokens
        if options:
            payload["options"] = options
        return payload

    def stream_chat(self, system: str, content: str) -> Iterator[str]:
        """Stream a chat completion from the model.

        A new request is made each time the returned iterator is
        consumed, so every call represents one independent attempt.

        Parameters
        ----------
        system : str
            The system instruction.
        content : str
            The user message.

        Yields
        ------
        str
            Non-empty text fragments in the order the server produces them.

        Raises
        ------
        LLMError
            If the request fails, the server returns an error, or a
            stream line cannot be decoded.
        """
        url = self._endpoint()
        payload = self._payload(system, content)
        logger.debug("Streaming chat from LLM at %s with model %s", url, self.model)
        try:
            response = requests.post(
                url,
                json=payload,
                stream=True,
                timeout=self.request_timeout,
            )
        except requests.RequestException as exc:
            logger.error("Failed to connect to LLM: %s", exc)
            raise LLMError(str(exc)) from exc

        try:
            if response.status_code != 200:
                logger.error(
                    "LLM returned non-200 status %s: %s", response.status_code, response.text
                )
                raise LLMError(f"LLM returned status {response.status_code}: {response.text}")

            try:
                for line in response.iter_lines(decode_unicode=True):
                    if not line:
                        continue
                    try:
                        chunk = json.loads(line)
                    except json.JSONDecodeError as exc:
                        logger.error("Failed to parse LLM stream line: %r", line)
                        raise LLMError("Failed to parse LLM response") from exc
                    if not isinstance(chunk, dict):
                        raise LLMError("Unexpected response structure from LLM")
                    if "error" in chunk:
                        raise LLMError(str(chunk["error"]))
                    message = chunk.get("message") or {}
                    fragment = message.get("content", "") if isinstance(message, dict) else ""
                    if fragment:
                        yield fragment
                    if chunk.get("done"):
                        return
            except requests.RequestException as exc:
                logger.error("LLM stream interrupted: %s", exc)
                raise LLMError(str(exc)) from exc
        finally:
            response.close()
