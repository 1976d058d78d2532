"""LLM answer generation."""
from __future__ import annotations

import httpx
from openai import APIStatusError, AsyncOpenAI

from .errors import UpstreamError
from .log_utils import logger

SYSTEM_PROMPT = (
    "You are SpaceQ, a concise and accurate assistant who answers questions about "
    "space, astronomy, astrophysics, and related topics for a general audience."
)
NO_ANSWER_PLACEHOLDER = "No answer returned by the model."
TEMPERATURE = 0.2
MAX_TOKENS = 800


class AnswerGenerator:
    """Wraps the OpenAI chat completion call that answers a space question."""

    def __init__(self, client: AsyncOpenAI, model: str) -> None:
        self._client = client
        self._model = model

    async def answer(self, question: str) -> str:
        """Return the model's answer, or a placeholder when it sent no text.

        Raises ``UpstreamError`` when the API responds with a non-2xx status.
        Transport failures propagate unchanged.
        """
        logger.info("Requesting completion from %s", self._model)
        try:
            completion = await self._client.chat.completions.create(
                model=self._model,
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": question},
                ],
            )
        except APIStatusError as exc:
            logger.error(
                "OpenAI API returned non-2xx status %s: %s",
                exc.status_code,
                exc.response.text,
            )
            raise UpstreamError() from exc

        choice = completion.choices[0] if completion.choices else None
        content = ""
        if choice and choice.message and choice.message.content:
            content = choice.message.content.strip()
        return content or NO_ANSWER_PLACEHOLDER

    async def aclose(self) -> None:
        """Close the underlying OpenAI client."""
        await self._client.close()


def build_openai_client(
    api_key: str,
    base_url: str | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> AsyncOpenAI:
    """Create the OpenAI client with SDK retries turned off."""
    return AsyncOpenAI(
        api_key=api_key,
        base_url=base_url,
        max_retries=0,
        http_client=http_client,
    )
