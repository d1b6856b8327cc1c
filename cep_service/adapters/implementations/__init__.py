"""
Adapter implementations package for the upstream CEP providers.
"""

from cep_service.adapters.implementations.apicep import ApiCEPAdapter
from cep_service.adapters.implementations.viacep import ViaCEPAdapter
from cep_service.domain.models import ProviderName

# Mapping of provider names to their implementation classes
ADAPTOR_IMPLEMENTATIONS = {
    ProviderName.VIACEP: ViaCEPAdapter,
    ProviderName.APICEP: ApiCEPAdapter,
}

__all__ = [
    "ApiCEPAdapter",
    "ViaCEPAdapter",
    "ADAPTOR_IMPLEMENTATIONS",
]
