"""外部服务的内存替身，离线测试用。"""

import asyncio

from insta_translate.schemas.clients import RefinementRequest, TranscriptionRequest, TranslationRequest


class FakeTranscriber:
    """按顺序返回结果；元素为异常时抛出。"""

    def __init__(self, *outcomes, gate: asyncio.Event | None = None) -> None:
        self.outcomes = list(outcomes) or ["Bonjour"]
        self.requests: list[TranscriptionRequest] = []
        self.gate = gate
        self.started = asyncio.Event()

    async def transcribe(self, request: TranscriptionRequest) -> str:
        self.requests.append(request)
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeTranslator:
    def __init__(self, *outcomes) -> None:
        self.outcomes = list(outcomes) or ["Hello"]
        self.requests: list[TranslationRequest] = []

    async def translate(self, request: TranslationRequest) -> str:
        self.requests.append(request)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeRefiner:
    """默认原样返回；可指定固定输出或异常。"""

    _ECHO = object()

    def __init__(self, outcome=_ECHO, delay: float = 0.0) -> None:
        self.outcome = outcome
        self.delay = delay
        self.requests: list[RefinementRequest] = []

    async def refine(self, request: RefinementRequest) -> str | None:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.outcome is self._ECHO:
            return request.text
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return self.outcome
