"""Core ask orchestration."""
from __future__ import annotations

from typing import Any, Optional

from .apod import ApodFetcher
from .completions import AnswerGenerator
from .config import Settings
from .errors import AskError, ConfigurationError, InternalError, InvalidInput
from .log_utils import logger
from .schemas import AskRequest, AskResponse


def parse_request(payload: Any) -> AskRequest:
    """Validate the request body and return it with the question trimmed."""
    question = payload.get("question") if isinstance(payload, dict) else None
    if not question or not isinstance(question, str):
        raise InvalidInput("Missing question (string expected)")

    cleaned = question.strip()
    if not cleaned:
        raise InvalidInput("Empty question")
    return AskRequest(question=cleaned)


class AskOrchestrator:
    """Coordinates validation, the LLM answer, and the optional APOD lookup.

    The LLM call is mandatory: its failure fails the request. Without an
    OpenAI key there is no generator and every valid question is answered
    with ``ConfigurationError``. The APOD call only runs after a successful
    answer and can only ever degrade the response to ``apod=None``.
    """

    def __init__(
        self,
        settings: Settings,
        generator: Optional[AnswerGenerator],
        apod_fetcher: ApodFetcher,
    ) -> None:
        self._settings = settings
        self._generator = generator
        self._apod_fetcher = apod_fetcher

    async def ask(self, payload: Any) -> AskResponse:
        """Validate ``payload`` and answer it."""
        request = parse_request(payload)
        if self._generator is None or not self._settings.has_openai_key:
            raise ConfigurationError()
        return await self.answer(request)

    async def answer(self, request: AskRequest) -> AskResponse:
        if self._generator is None:
            raise ConfigurationError()

        logger.info("Answering question (%s chars)", len(request.question))
        try:
            answer = await self._generator.answer(request.question)
        except AskError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to answer question")
            raise InternalError() from exc

        apod = await self._apod_fetcher.fetch_today()
        logger.info("Answer ready; APOD %s", "attached" if apod is not None else "not attached")
        return AskResponse(answer=answer, apod=apod)

    async def aclose(self) -> None:
        """Release upstream clients."""
        if self._generator is not None:
            await self._generator.aclose()
        await self._apod_fetcher.aclose()
