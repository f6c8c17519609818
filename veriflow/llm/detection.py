"""Auto-detection of available LLM providers and the default model.

Checks for API keys in the environment (after loading .env files from
common locations) and returns an appropriate default model.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from veriflow.llm.models import Anthropic, Azure, Cerebras, Google, OpenAI

# Track if we've already tried loading env files
_env_loaded = False


def load_env_files() -> None:
    """
    Auto-load .env files from common locations.

    Checks (in order):
    1. Current working directory (.env)
    2. Parent directories up to 2 levels
    3. User's home directory (~/.env)

    The first file found wins; existing environment variables are kept.
    """
    global _env_loaded
    if _env_loaded:
        return
    _env_loaded = True

    locations = [
        Path.cwd() / ".env",
        Path.cwd().parent / ".env",
        Path.cwd().parent.parent / ".env",
        Path.home() / ".env",
    ]
    for loc in locations:
        if loc.exists():
            load_dotenv(loc, override=False)
            break


def detect_available_provider() -> str | None:
    """
    Detect which LLM provider has an API key configured.

    Checks in order of preference:
    1. Azure OpenAI (AZURE_API_KEY with AZURE_API_BASE)
    2. OpenAI (OPENAI_API_KEY)
    3. Anthropic (ANTHROPIC_API_KEY)
    4. Google (GOOGLE_API_KEY or GEMINI_API_KEY)
    5. Cerebras (CEREBRAS_API_KEY)

    Returns:
        Provider name or None if none found
    """
    load_env_files()

    if os.getenv("AZURE_API_KEY") and os.getenv("AZURE_API_BASE"):
        return "azure"
    if os.getenv("OPENAI_API_KEY"):
        return "openai"
    if os.getenv("ANTHROPIC_API_KEY"):
        return "anthropic"
    if os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY"):
        return "google"
    if os.getenv("CEREBRAS_API_KEY"):
        return "cerebras"
    return None


def get_default_model() -> str:
    """
    Get the default SQL generation model based on available API keys.

    If no provider is found, returns an OpenAI model as fallback; the call
    then fails at request time and the assistants fall back to placeholder
    output.
    """
    provider = detect_available_provider()

    if provider == "azure":
        return Azure.deployment(os.getenv("AZURE_OPENAI_DEPLOYMENT", Azure.DEFAULT_DEPLOYMENT))
    if provider == "anthropic":
        return Anthropic.CLAUDE_35_SONNET
    if provider == "google":
        return Google.GEMINI_2_FLASH
    if provider == "cerebras":
        return Cerebras.GPT_OSS_120B
    return OpenAI.GPT_4O_MINI


def has_provider() -> bool:
    """True if any provider API key is configured."""
    return detect_available_provider() is not None


__all__ = [
    "load_env_files",
    "detect_available_provider",
    "get_default_model",
    "has_provider",
]
