import logging
from typing import Dict, Type, List, Optional

from cep_service.adapters.interfaces.provider import ProviderAdapter
from cep_service.core.config import Settings

logger = logging.getLogger(__name__)


def _key(provider: str) -> str:
    # ProviderName members key by their value, plain strings as given
    return getattr(provider, "value", provider)


class AdaptorRegistry:
    """
    Registry of available provider adaptor implementations.

    Maps provider names to their implementing classes. The race coordinator
    races one instance of every registered adaptor, so adding a provider means
    writing its adaptor and registering it here.
    """

    def __init__(self):
        """
        Initialize an empty adaptor registry.
        """
        self._adaptors: Dict[str, Type[ProviderAdapter]] = {}
        logger.debug("Initialized AdaptorRegistry")

    def register(self, provider: str, adaptor_class: Type[ProviderAdapter]) -> None:
        """
        Register an adaptor implementation.

        Args:
            provider: Provider name the adaptor answers for
            adaptor_class: Class to instantiate for this provider

        Raises:
            ValueError: If the provider name is invalid or already registered
        """
        if not provider or not isinstance(provider, str):
            raise ValueError("Provider name must be a non-empty string")

        if not isinstance(adaptor_class, type) or not issubclass(adaptor_class, ProviderAdapter):
            raise ValueError(
                "Adaptor class must be a subclass of ProviderAdapter"
            )

        key = _key(provider)
        if key in self._adaptors:
            raise ValueError(f"Provider '{key}' is already registered")

        self._adaptors[key] = adaptor_class
        logger.info(f"Registered adaptor for provider: {key}")

    def get(self, provider: str) -> Optional[Type[ProviderAdapter]]:
        """
        Retrieve an adaptor implementation by provider name.

        Returns:
            The adaptor class if found, None otherwise
        """
        return self._adaptors.get(_key(provider))

    def list(self) -> List[str]:
        """
        List all registered provider names, in registration order.
        """
        return list(self._adaptors.keys())

    def is_registered(self, provider: str) -> bool:
        return _key(provider) in self._adaptors

    def clear(self) -> None:
        """
        Clear all registered adaptors.
        Primarily used for testing purposes.
        """
        self._adaptors.clear()
        logger.debug("Cleared all registered adaptors")

    def create_all(self, settings: Settings) -> List[ProviderAdapter]:
        """
        Instantiate every registered adaptor with its configured base URL.

        Args:
            settings: Application settings holding the provider base URLs

        Returns:
            One adaptor instance per registered provider
        """
        adaptors = []
        for provider, adaptor_class in self._adaptors.items():
            base_url = getattr(settings, adaptor_class.BASE_URL_SETTING)
            adaptors.append(adaptor_class(base_url))
            logger.debug(f"Created {provider} adaptor for {base_url}")
        return adaptors


def default_registry() -> AdaptorRegistry:
    """
    Build a registry holding every built-in provider adaptor.
    """
    from cep_service.adapters.implementations import ADAPTOR_IMPLEMENTATIONS

    registry = AdaptorRegistry()
    for provider, adaptor_class in ADAPTOR_IMPLEMENTATIONS.items():
        registry.register(provider, adaptor_class)
    return registry
