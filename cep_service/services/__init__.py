"""
Services package for the CEP Race Service.

Services orchestrate the application workflow, coordinating the domain models
and the provider adaptors. They depend on the adaptor interface rather than on
concrete providers.
"""

from cep_service.services.race_coordinator import RACE_DEADLINE_SECONDS, RaceCoordinator

__all__ = [
    "RACE_DEADLINE_SECONDS",
    "RaceCoordinator",
]
