"""OpenAI vision describer — GPT-4o image descriptions via LangChain."""

from __future__ import annotations

import base64

import structlog
from langchain_openai import ChatOpenAI

from adforge.config import settings
from adforge.errors import AnalysisError, ConfigurationError

logger = structlog.get_logger()


class OpenAIImageDescriber:
    """``ImageDescriber`` backed by a multimodal chat model."""

    def __init__(self, model: str | None = None, api_key: str | None = None):
        key = api_key if api_key is not None else settings.openai_api_key
        if not key:
            raise ConfigurationError("OPENAI_API_KEY is not configured", stage="analysis")
        self.model = model or settings.vision_model
        self._llm = ChatOpenAI(
            model=self.model,
            api_key=key,
            max_tokens=200,
        )

    async def describe(self, image_bytes: bytes, mime_type: str, prompt: str) -> str:
        data_url = f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode()}"

        logger.info(
            "vision.describe.start",
            model=self.model,
            mime_type=mime_type,
            image_kb=round(len(image_bytes) / 1024, 2),
        )
        try:
            response = await self._llm.ainvoke(
                [
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {"type": "image_url", "image_url": {"url": data_url, "detail": "low"}},
                        ],
                    }
                ]
            )
        except Exception as exc:
            raise AnalysisError(f"Vision request failed: {exc}", stage="analysis") from exc

        text = response.content if isinstance(response.content, str) else ""
        if not text.strip():
            raise AnalysisError("Vision model returned an empty description", stage="analysis")

        logger.info("vision.describe.done", chars=len(text))
        return text.strip()
