"""Ad script drafting via an OpenAI chat model (LangChain)."""

from __future__ import annotations

import structlog
from langchain_openai import ChatOpenAI

from adforge.config import settings
from adforge.errors import ConfigurationError, DraftError

logger = structlog.get_logger()

# ---------------------------------------------------------------------------
# Prompt templates
# ---------------------------------------------------------------------------

DRAFT_SYSTEM_PROMPT = "You are an expert ad copywriter specializing in video scripts."

DRAFT_USER_PROMPT = """\
You are a professional ad copywriter. Based on the following image analysis of a \
{niche} property/product, create a compelling 30-45 second video ad script.

Image Analysis:
{analysis_text}

Requirements:
- Start with an attention-grabbing hook
- Highlight key features and benefits from the analysis
- Include emotional appeal
- End with a strong call-to-action
- Keep it concise and punchy (suitable for voiceover)
- Write in a conversational, engaging tone

Generate the script now:"""


class OpenAIScriptDrafter:
    """``ScriptDrafter`` backed by a chat model."""

    def __init__(self, model: str | None = None, api_key: str | None = None):
        key = api_key if api_key is not None else settings.openai_api_key
        if not key:
            raise ConfigurationError("OPENAI_API_KEY is not configured", stage="drafting")
        self.model = model or settings.draft_model
        self._llm = ChatOpenAI(
            model=self.model,
            api_key=key,
            temperature=0.8,
            max_tokens=500,
        )

    async def draft(self, combined_descriptions: str, niche: str) -> str:
        logger.info("drafter.start", model=self.model, niche=niche, context_len=len(combined_descriptions))
        try:
            response = await self._llm.ainvoke(
                [
                    {"role": "system", "content": DRAFT_SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": DRAFT_USER_PROMPT.format(
                            niche=niche, analysis_text=combined_descriptions
                        ),
                    },
                ]
            )
        except Exception as exc:
            raise DraftError(f"Script drafting failed: {exc}", stage="drafting") from exc

        script = response.content.strip() if isinstance(response.content, str) else ""
        if not script:
            raise DraftError("Language model returned an empty script", stage="drafting")

        logger.info("drafter.done", script_len=len(script))
        return script
