from typing import Any

from .base import AIClient
from .providers import GeminiClient


def create_ai_client(provider: str, **config: Any) -> AIClient:
    """Create an AI client instance.

    This factory function hides the instantiation logic for different providers.

    Args:
        provider: Provider type (currently only 'gemini')
        **config: Provider-specific configuration
            For Gemini:
                - api_key: str (required)
                - model: str (default: 'gemini-2.5-flash')
                - image_model: str (default: 'gemini-2.5-flash-image')

    Returns:
        Initialized AI client instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> client = create_ai_client(
        ...     "gemini",
        ...     api_key="...",
        ...     model="gemini-2.5-flash"
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower in ("gemini", "google"):
        if "api_key" not in config:
            raise TypeError("Gemini provider requires 'api_key' in config")
        return GeminiClient(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'gemini'"
    )
