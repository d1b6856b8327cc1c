from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from cep_service.api.dependencies import get_race_coordinator
from cep_service.core.exceptions import InvalidCEPError, LookupTimeoutError
from cep_service.core.logging import get_logger
from cep_service.domain.cep import parse_cep
from cep_service.domain.models import OutcomeKind
from cep_service.services.race_coordinator import RaceCoordinator

# Initialize router and logger
cep_router = APIRouter()
logger = get_logger(__name__)


@cep_router.get(
    "/",
    status_code=status.HTTP_200_OK,
    summary="Resolve a CEP",
    description="Races every upstream provider and returns the first address found."
)
async def get_cep(
    cep: Optional[str] = Query(None, description="CEP as 12345678 or 12345-678"),
    coordinator: RaceCoordinator = Depends(get_race_coordinator),
) -> Dict[str, str]:
    """
    Resolve a CEP through the provider race.

    Args:
        cep: Postal code from the query string
        coordinator: Race coordinator dependency

    Returns:
        Dict[str, str]: The winning record in wire shape

    Raises:
        InvalidCEPError: If `cep` is missing or malformed
        LookupTimeoutError: If no provider answered before the deadline
    """
    code = parse_cep(cep)

    outcome = await coordinator.resolve(code)

    if outcome.kind is OutcomeKind.INVALID:
        raise InvalidCEPError(raw_code=cep)
    if outcome.kind is OutcomeKind.TIMEOUT:
        raise LookupTimeoutError(cep=cep, deadline=coordinator.deadline)

    return outcome.record.to_response()
