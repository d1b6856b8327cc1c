from fastapi import Request

from cep_service.core.logging import get_logger
from cep_service.services.race_coordinator import RaceCoordinator

# Initialize logger
logger = get_logger(__name__)


async def get_race_coordinator(request: Request) -> RaceCoordinator:
    """
    Dependency for providing the race coordinator.

    The coordinator and its HTTP client are created once in the application
    lifespan and shared by every request.

    Returns:
        RaceCoordinator: The application-wide coordinator
    """
    return request.app.state.race_coordinator
