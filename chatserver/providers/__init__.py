"""Identity provider package for extension loading and the provider registry."""

from .errors import ProviderConsistencyError, ProviderError, ProviderExchangeError, ProviderLoadError
from .interfaces import IdentityProviderPort, ProviderDefinitionDecoder
from .loader import provider_load_directory
from .oauth_provider import OAuthProvider, ProviderDefinition, oauth_load_provider_from_file
from .registry import IdentityProviderRegistry

__all__ = [
    "IdentityProviderPort",
    "IdentityProviderRegistry",
    "OAuthProvider",
    "ProviderConsistencyError",
    "ProviderDefinition",
    "ProviderDefinitionDecoder",
    "ProviderError",
    "ProviderExchangeError",
    "ProviderLoadError",
    "oauth_load_provider_from_file",
    "provider_load_directory",
]
