"""Configuration management for the Virtual Try-On Studio."""

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings


BASE_PROMPT = (
    "As an expert fashion stylist, create a hyper-realistic photo of the person in the "
    "first image wearing the clothing item from the second image. The final photo should "
    "look natural and fashionable. Ensure the lighting, shadows, and fit of the clothing "
    "are realistic. The person's face and body should be preserved. "
    "Generate a high-quality result."
)


class GeminiConfig(BaseModel):
    """Generative image service connection settings."""
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.5-flash-image-preview"
    timeout: float = 120.0  # per request, seconds

    @property
    def model_url(self) -> str:
        return f"{self.base_url}/models/{self.model}"


class PromptConfig(BaseModel):
    """Prompt variant settings. One request is issued per variant."""
    base_prompt: str = BASE_PROMPT
    augmentations: list[str] = Field(default_factory=lambda: [
        "Show a full-body shot from the front.",
        "Create a version where the person is in a slightly different, casual pose, "
        "for example, leaning against a wall.",
    ])


class PipelineConfig(BaseSettings):
    """Main pipeline configuration."""

    # Sub-configs
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    prompts: PromptConfig = Field(default_factory=PromptConfig)

    # Credential (loaded from .env or the process environment)
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "api_key"),
    )

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = ""
        env_nested_delimiter = "__"
        extra = "ignore"


def load_config() -> PipelineConfig:
    """Load configuration from environment and defaults."""
    return PipelineConfig()
