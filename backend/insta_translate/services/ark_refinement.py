"""火山方舟 Ark 译文润色：对机器翻译结果做语法与语境修正。"""

import asyncio

from loguru import logger

from insta_translate.config import RefinementConfig, VolcengineConfig
from insta_translate.errors import RefinementFailed
from insta_translate.schemas.clients import RefinementRequest

SYSTEM_PROMPT = "You are an assistant helping refine translations."

INSTRUCTION = "Refine this translation for grammar and context: {text}"


def build_request(text: str) -> RefinementRequest:
    return RefinementRequest(instruction=INSTRUCTION, text=text)


def _refine_sync(
    request: RefinementRequest,
    volc: VolcengineConfig,
    params: RefinementConfig,
) -> str | None:
    """
    同步调用 Ark chat completions，返回润色后的全文。
    在 run_in_executor 中调用，避免阻塞事件循环。
    """
    from volcenginesdkarkruntime import Ark

    client = Ark(api_key=volc.ark_api_key, base_url=volc.ark_base_url)
    logger.info(f"Ark 润色 输入: {request.text=}")
    completion = client.chat.completions.create(
        model=volc.ark_model_id,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": request.instruction.format(text=request.text)},
        ],
        max_tokens=params.max_tokens,
        temperature=params.temperature,
    )
    if not completion.choices:
        return None
    out = (completion.choices[0].message.content or "").strip()
    logger.info(f"Ark 润色 输出: {out=}")
    return out or None


class ArkRefinementClient:
    """译文 -> 润色译文；未配置 Ark 时原样返回。"""

    def __init__(self, volc: VolcengineConfig, params: RefinementConfig) -> None:
        self.volc = volc
        self.params = params

    async def refine(self, request: RefinementRequest) -> str | None:
        if not self.volc.ark_valid:
            return request.text
        if not request.text.strip():
            return None

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(
                None, lambda: _refine_sync(request, self.volc, self.params)
            )
        except Exception as e:
            raise RefinementFailed(f"Ark refinement error: {e!r}") from e
