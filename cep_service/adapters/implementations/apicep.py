from cep_service.adapters.interfaces.provider import ProviderAdapter
from cep_service.domain.models import ProviderName


class ApiCEPAdapter(ProviderAdapter):
    """Adaptor for the ApiCEP static file CDN."""

    URL_TEMPLATE = "/file/apicep/{code}.json"
    BASE_URL_SETTING = "APICEP_BASE_URL"

    FIELD_MAP = {
        "code": "code",
        "address": "street",
        "district": "neighborhood",
        "city": "city",
        "state": "region",
    }

    @property
    def name(self) -> ProviderName:
        return ProviderName.APICEP
