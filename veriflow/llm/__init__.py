"""LLM access: LiteLLM client, model names and provider detection."""

from veriflow.llm.client import LLM
from veriflow.llm.detection import detect_available_provider, get_default_model, has_provider

__all__ = ["LLM", "detect_available_provider", "get_default_model", "has_provider"]
