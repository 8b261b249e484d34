"""Prompt variants for try-on generation."""

from .config import PromptConfig


def build_prompt_variants(config: PromptConfig | None = None) -> list[str]:
    """Build the ordered list of prompt variants.

    The first variant is the base instruction on its own; every
    augmentation is appended to the base to form one more variant.
    Result order follows this list.
    """
    config = config or PromptConfig()
    base = config.base_prompt.strip()
    if not base:
        raise ValueError("base prompt must not be empty")

    variants = [base]
    for augmentation in config.augmentations:
        augmentation = augmentation.strip()
        if augmentation:
            variants.append(f"{base} {augmentation}")
    return variants
