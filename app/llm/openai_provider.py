"""
OpenAI provider implementation.
"""
import logging
from typing import Optional, Dict
from openai import OpenAI, APIError

from app.core.config import OPENAI_API_KEY, OPENAI_MODEL
from app.llm.provider import LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI provider using official OpenAI SDK."""

    name = "openai"
    
    def __init__(self, api_key: Optional[str] = None, default_model: str = OPENAI_MODEL):
        """Initialize OpenAI client."""
        self.api_key = api_key or OPENAI_API_KEY
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY not configured")
        self.client = OpenAI(api_key=self.api_key)
        self.default_model = default_model
        logger.info("OpenAI provider initialized")
    
    def chat(
        self,
        messages: list[Dict[str, str]],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """Generate a chat completion."""
        model = model or self.default_model
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens or 2000,
            )
        except APIError as e:
            logger.error(f"OpenAI API error: {e}", exc_info=True)
            raise

        usage = response.usage
        return LLMResponse(
            content=response.choices[0].message.content or "",
            tokens_in=usage.prompt_tokens if usage else 0,
            tokens_out=usage.completion_tokens if usage else 0,
            model=model,
            metadata={"finish_reason": response.choices[0].finish_reason},
        )


def get_provider() -> LLMProvider:
    """OpenAI when a key is configured, otherwise the rule-based template provider."""
    from app.llm.provider import TemplateProvider

    if OPENAI_API_KEY:
        try:
            return OpenAIProvider()
        except ValueError as e:
            logger.warning(f"Failed to initialize OpenAI provider: {e}, falling back to template")
    else:
        logger.info("OPENAI_API_KEY not configured - using template provider")
    return TemplateProvider()
