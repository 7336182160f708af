import os
from typing import Protocol

import litellm

from pr_narrator.config import Settings


class LLMError(Exception):
    """Network, auth, rate-limit or empty-response failure of the model call."""


class TextGenerator(Protocol):
    def complete(
        self,
        system: str,
        user: str,
        *,
        temperature: float,
        max_tokens: int,
        seed: int,
        json_mode: bool = False,
    ) -> str: ...


class LLMClient:
    def __init__(self, settings: Settings):
        self.model = settings.llm_model
        self._setup_api_keys(settings)

    def _setup_api_keys(self, settings: Settings):
        if settings.gemini_api_key:
            os.environ["GEMINI_API_KEY"] = settings.gemini_api_key
        if settings.openai_api_key:
            os.environ["OPENAI_API_KEY"] = settings.openai_api_key
        if settings.anthropic_api_key:
            os.environ["ANTHROPIC_API_KEY"] = settings.anthropic_api_key
        if settings.xai_api_key:
            os.environ["XAI_API_KEY"] = settings.xai_api_key

    def complete(
        self,
        system: str,
        user: str,
        *,
        temperature: float,
        max_tokens: int,
        seed: int,
        json_mode: bool = False,
    ) -> str:
        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = litellm.completion(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
                seed=seed,
                num_retries=0,
                drop_params=True,
                **kwargs,
            )
        except Exception as e:
            raise LLMError(f"{type(e).__name__}: {e}") from e

        text = (response.choices[0].message.content or "").strip()
        if not text:
            raise LLMError("Model returned an empty response")
        return text
