"""Model identifiers understood by LiteLLM, grouped by provider."""


class OpenAI:
    GPT_4O = "gpt-4o"
    GPT_4O_MINI = "gpt-4o-mini"


class Anthropic:
    CLAUDE_35_HAIKU = "claude-3-5-haiku-20241022"
    CLAUDE_35_SONNET = "claude-3-5-sonnet-20241022"


class Google:
    GEMINI_2_FLASH = "gemini/gemini-2.0-flash"


class Cerebras:
    GPT_OSS_120B = "cerebras/gpt-oss-120b"


class Azure:
    """Azure OpenAI; the deployment name comes from AZURE_OPENAI_DEPLOYMENT."""

    DEFAULT_DEPLOYMENT = "gpt-4o-mini"

    @staticmethod
    def deployment(name: str) -> str:
        return f"azure/{name}"


__all__ = ["OpenAI", "Anthropic", "Google", "Cerebras", "Azure"]
