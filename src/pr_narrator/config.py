from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    github_token: str | None = None
    github_repository: str | None = None
    github_app_id: str | None = None
    github_private_key: str | None = None
    github_webhook_secret: str | None = None

    llm_model: str = "gpt-4o"
    gemini_api_key: str | None = None
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None
    xai_api_key: str | None = None

    # Comma-separated glob list, e.g. "**/*.lock,dist/**"
    exclude: str = ""
    attribution: Literal["bot", "author"] = "bot"

    evidence_prompt_version: str = "v1"
    narrative_prompt_version: str = "v2"

    @property
    def exclude_patterns(self) -> list[str]:
        from pr_narrator.diff.filters import parse_patterns

        return parse_patterns(self.exclude)


def get_settings() -> Settings:
    return Settings()
