"""Factory for creating and managing fact-check database providers."""

from typing import Dict, List, Optional, Type

from ...domain.ports.fact_check_database import FactCheckDatabaseProvider
from .google_fact_check_adapter import GoogleFactCheckAdapter


class FactCheckDatabaseFactory:
    """Factory for creating and managing fact-check database providers.

    This factory maintains a registry of available database providers
    and handles their lifecycle (initialization, shutdown).
    """

    def __init__(self):
        """Initialize the factory."""
        self._provider_registry: Dict[str, Type[FactCheckDatabaseProvider]] = {}
        self._active_providers: Dict[str, FactCheckDatabaseProvider] = {}

        # Register default providers
        self.register_provider("google_fact_check", GoogleFactCheckAdapter)

    def register_provider(
        self, name: str, provider_class: Type[FactCheckDatabaseProvider]
    ) -> None:
        """Register a new database provider class.

        Args:
            name: Unique identifier for the provider
            provider_class: The provider class to register
        """
        if name in self._provider_registry:
            raise ValueError(f"Provider {name} already registered")
        self._provider_registry[name] = provider_class

    async def create_provider(self, name: str, **config) -> FactCheckDatabaseProvider:
        """Create and initialize a new database provider instance.

        Args:
            name: Name of the provider to create
            **config: Provider-specific configuration

        Returns:
            Initialized provider instance

        Raises:
            ValueError: If provider not found
            RuntimeError: If initialization fails
        """
        if name not in self._provider_registry:
            raise ValueError(f"Provider {name} not registered")

        provider = self._provider_registry[name](**config)
        try:
            await provider.initialize()
        except Exception as e:
            raise RuntimeError(f"Failed to initialize provider {name}: {e}")
        self._active_providers[name] = provider
        return provider

    def get_provider(self, name: str) -> Optional[FactCheckDatabaseProvider]:
        """Get an active provider instance by name."""
        return self._active_providers.get(name)

    @property
    def active_providers(self) -> List[FactCheckDatabaseProvider]:
        return list(self._active_providers.values())

    async def shutdown_provider(self, name: str) -> None:
        """Shutdown a specific provider.

        Args:
            name: Name of the provider to shutdown
        """
        provider = self._active_providers.get(name)
        if provider:
            await provider.shutdown()
            del self._active_providers[name]

    async def shutdown_all(self) -> None:
        """Shutdown all active providers."""
        for name in list(self._active_providers.keys()):
            await self.shutdown_provider(name)

    def list_providers(self) -> Dict[str, bool]:
        """Get dictionary of registered providers and their availability.

        Returns:
            Dictionary mapping provider names to their availability status
        """
        return {
            name: bool(self.get_provider(name)) and self._active_providers[name].is_available
            for name in self._provider_registry
        }
