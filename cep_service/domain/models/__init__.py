"""
Domain models package for the CEP Race Service.

Models are created per request and discarded once the response is written.
"""

from cep_service.domain.models.address import NormalizedRecord, ProviderName
from cep_service.domain.models.outcome import OutcomeKind, RaceOutcome

__all__ = [
    "NormalizedRecord",
    "ProviderName",
    "OutcomeKind",
    "RaceOutcome",
]
