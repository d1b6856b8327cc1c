import asyncio
import logging
import time
from typing import Coroutine, Iterable, List, Set

import httpx

from cep_service.adapters.interfaces.provider import ProviderAdapter
from cep_service.core.exceptions import IntegrationException
from cep_service.domain.cep import is_valid_cep, normalize_cep
from cep_service.domain.models import NormalizedRecord, RaceOutcome

logger = logging.getLogger(__name__)

# Fixed wall-clock bound for a whole race, measured from dispatch
RACE_DEADLINE_SECONDS = 1.0


class RaceCoordinator:
    """
    Resolves a CEP by racing every provider adaptor against a deadline.

    Each adaptor runs in its own task and publishes its record into its own
    single-slot future. The coordinator performs one multi-way wait over all
    slots plus the deadline; the first ready slot wins. Slower adaptors are
    never cancelled: their tasks finish in the background and their results
    are dropped.

    An adaptor that fails with an upstream error does not publish at all, so
    its slot stays empty and the race is decided by another adaptor or by the
    deadline.
    """

    def __init__(
        self,
        adapters: Iterable[ProviderAdapter],
        client: httpx.AsyncClient,
        deadline: float = RACE_DEADLINE_SECONDS,
    ):
        """
        Initialize the coordinator.

        Args:
            adapters: Provider adaptors to race, at least one
            client: Shared HTTP client handed to every adaptor call
            deadline: Seconds before the race resolves to a timeout
        """
        self.adapters = list(adapters)
        if not self.adapters:
            raise ValueError("RaceCoordinator needs at least one adaptor")
        self.client = client
        self.deadline = deadline

        # Detached adaptor tasks, kept referenced until they finish
        self._bg_tasks: Set[asyncio.Task] = set()

    async def resolve(self, raw_code: str) -> RaceOutcome:
        """
        Validate, normalize and race a CEP across all adaptors.

        Args:
            raw_code: CEP exactly as the caller supplied it

        Returns:
            RaceOutcome: The winning record, a timeout, or invalid input
        """
        if not is_valid_cep(raw_code):
            logger.info(f"Rejected malformed CEP {raw_code!r}")
            return RaceOutcome.invalid()

        code = normalize_cep(raw_code)
        loop = asyncio.get_running_loop()

        slots: List[asyncio.Future] = []
        for adapter in self.adapters:
            slot = loop.create_future()
            slots.append(slot)
            self._spawn(self._run_adapter(adapter, code, slot))

        started = time.monotonic()
        done, _ = await asyncio.wait(
            slots, timeout=self.deadline, return_when=asyncio.FIRST_COMPLETED
        )

        if not done:
            logger.warning(
                f"Timeout resolving CEP {code}",
                extra={"data": {"cep": code, "deadline_s": self.deadline}}
            )
            return RaceOutcome.timeout()

        # Several slots may be ready at once; any of them is a valid winner
        record = next(iter(done)).result()
        self._log_winner(record, elapsed=time.monotonic() - started)
        return RaceOutcome.of(record)

    async def aclose(self) -> None:
        """Wait for detached adaptor tasks that are still in flight."""
        if self._bg_tasks:
            logger.debug(f"Waiting for {len(self._bg_tasks)} detached adaptor task(s)")
            await asyncio.gather(*self._bg_tasks, return_exceptions=True)

    def _spawn(self, coro: Coroutine) -> None:
        task = asyncio.create_task(coro)
        self._bg_tasks.add(task)
        task.add_done_callback(self._bg_tasks.discard)

    async def _run_adapter(
        self, adapter: ProviderAdapter, code: str, slot: asyncio.Future
    ) -> None:
        provider = adapter.name.value
        started = time.monotonic()
        try:
            record = await adapter.fetch(code, self.client)
        except IntegrationException as e:
            logger.warning(
                f"{provider} forfeited CEP {code}: {e.detail}",
                extra={"data": e.to_dict()}
            )
            return
        except Exception:
            logger.exception(f"{provider} crashed while resolving CEP {code}")
            return

        logger.debug(f"{provider} answered CEP {code} in {round((time.monotonic() - started) * 1000, 2)}ms")
        if not slot.done():
            slot.set_result(record)

    def _log_winner(self, record: NormalizedRecord, elapsed: float) -> None:
        logger.info(
            f"Resolved {record}",
            extra={
                "data": {
                    "cep": record.code,
                    "logradouro": record.street,
                    "bairro": record.neighborhood,
                    "localidade": record.city,
                    "uf": record.region,
                    "api": record.source_provider.value,
                    "race_ms": round(elapsed * 1000, 2),
                }
            }
        )
