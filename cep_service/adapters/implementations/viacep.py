from cep_service.adapters.interfaces.provider import ProviderAdapter
from cep_service.domain.models import ProviderName


class ViaCEPAdapter(ProviderAdapter):
    """Adaptor for viacep.com.br, which already uses the public field names."""

    URL_TEMPLATE = "/ws/{code}/json/"
    BASE_URL_SETTING = "VIACEP_BASE_URL"

    FIELD_MAP = {
        "cep": "code",
        "logradouro": "street",
        "bairro": "neighborhood",
        "localidade": "city",
        "uf": "region",
    }

    @property
    def name(self) -> ProviderName:
        return ProviderName.VIACEP
