from dataclasses import dataclass
from enum import Enum
from typing import Dict


class ProviderName(str, Enum):
    """Known upstream providers; the value is the `api` tag sent to clients."""
    VIACEP = "ViaCEP"
    APICEP = "ApiCep"


@dataclass(frozen=True)
class NormalizedRecord:
    """Domain model for an address resolved by one provider."""

    code: str
    street: str
    neighborhood: str
    city: str
    region: str
    source_provider: ProviderName

    def to_response(self) -> Dict[str, str]:
        """Maps the record onto the public wire field names."""
        return {
            "cep": self.code,
            "logradouro": self.street,
            "bairro": self.neighborhood,
            "localidade": self.city,
            "uf": self.region,
            "api": self.source_provider.value,
        }

    def __str__(self):
        return (
            f"CEP {self.code}: {self.street}, {self.neighborhood}, "
            f"{self.city}/{self.region} (via {self.source_provider.value})"
        )
