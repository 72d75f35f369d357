"""Factory for creating and managing AI providers."""

from typing import Any, Dict, Optional, Type

from .huggingface_adapter import HuggingFaceAdapter, HuggingFaceConfig
from .openai_reasoning_adapter import OpenAIConfig, OpenAIReasoningAdapter

_CONFIG_TYPES: Dict[str, Type] = {
    "huggingface": HuggingFaceConfig,
    "openai": OpenAIConfig,
}


class AIProviderFactory:
    """Factory for creating and managing AI providers."""

    def __init__(self):
        """Initialize the factory."""
        self._providers: Dict[str, Type] = {}
        self._instances: Dict[str, Any] = {}

        # Register default providers
        self.register_provider("huggingface", HuggingFaceAdapter)
        self.register_provider("openai", OpenAIReasoningAdapter)

    def register_provider(self, name: str, provider_class: Type) -> None:
        """Register a new AI provider.

        Args:
            name: Provider name
            provider_class: Provider class
        """
        self._providers[name] = provider_class

    async def create_provider(self, name: str, config: Optional[Any] = None, **kwargs) -> Any:
        """Create and initialize a provider instance.

        Args:
            name: Provider name
            config: Provider configuration object
            **kwargs: Extra constructor arguments

        Returns:
            Initialized provider instance

        Raises:
            ValueError: If provider not found
        """
        if name not in self._providers:
            raise ValueError(f"Provider '{name}' not found")

        if name not in self._instances:
            if config is None and name in _CONFIG_TYPES:
                config = _CONFIG_TYPES[name]()
            provider = self._providers[name](config=config, **kwargs)
            await provider.initialize()
            self._instances[name] = provider

        return self._instances[name]

    def get_provider(self, name: str) -> Optional[Any]:
        """Get an existing provider instance.

        Args:
            name: Provider name

        Returns:
            Provider instance if exists, None otherwise
        """
        return self._instances.get(name)

    @property
    def available_providers(self) -> Dict[str, bool]:
        """Get dictionary of registered providers and their availability."""
        return {
            name: name in self._instances and self._instances[name].is_available
            for name in self._providers
        }

    async def shutdown(self) -> None:
        """Shutdown all provider instances."""
        for provider in self._instances.values():
            await provider.shutdown()
        self._instances.clear()
