from abc import ABC, abstractmethod
from typing import Any, Dict
import logging

import httpx

from cep_service.core.exceptions import UpstreamDecodeError, UpstreamTransportError
from cep_service.domain.models import NormalizedRecord, ProviderName

logger = logging.getLogger(__name__)

# Fields every provider must be able to fill, in NormalizedRecord order
RECORD_FIELDS = ("code", "street", "neighborhood", "city", "region")


class ProviderAdapter(ABC):
    """
    Abstract base interface for CEP provider adaptors.

    An adaptor knows three provider-specific things: its name, how to build the
    lookup URL for a normalized CEP, and how the upstream names its fields
    (FIELD_MAP). Everything else, including the single HTTP call and the
    projection onto NormalizedRecord, is shared here.

    Adaptors do not retry and do not enforce a deadline; the race coordinator
    owns the deadline.
    """

    #: Maps upstream field names to NormalizedRecord field names
    FIELD_MAP: Dict[str, str] = {}

    #: Path appended to the base URL; `{code}` is replaced with the CEP
    URL_TEMPLATE: str = ""

    #: Name of the Settings field holding this provider's base URL
    BASE_URL_SETTING: str = ""

    def __init__(self, base_url: str):
        """
        Initialize the adaptor.

        Args:
            base_url: Scheme and host of the upstream, without a trailing slash
        """
        self.base_url = base_url.rstrip("/")

    @property
    @abstractmethod
    def name(self) -> ProviderName:
        """Identity written into `source_provider` of every record produced."""

    def build_url(self, code: str) -> str:
        """
        Builds the lookup URL for a normalized CEP.

        Args:
            code: CEP already in the canonical 5-3 hyphenated shape

        Returns:
            str: Absolute URL for this provider
        """
        return self.base_url + self.URL_TEMPLATE.format(code=code)

    async def fetch(self, code: str, client: httpx.AsyncClient) -> NormalizedRecord:
        """
        Looks up a CEP with exactly one GET request.

        Args:
            code: CEP already in the canonical 5-3 hyphenated shape
            client: Shared HTTP client

        Returns:
            NormalizedRecord: The upstream answer tagged with this provider

        Raises:
            UpstreamTransportError: On connection failures or non-2xx answers
            UpstreamDecodeError: If the body is not JSON or does not fit the schema
        """
        url = self.build_url(code)
        logger.debug(f"{self.name.value}: GET {url}")

        try:
            response = await client.get(url, headers={"Accept": "application/json"})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamTransportError(
                provider=self.name.value,
                detail=f"{self.name.value} answered HTTP {e.response.status_code}",
                original_exception=e,
                context={"url": url, "status_code": e.response.status_code},
            )
        except httpx.HTTPError as e:
            raise UpstreamTransportError(
                provider=self.name.value,
                detail=f"Error on get cep by {self.name.value}",
                original_exception=e,
                context={"url": url},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamDecodeError(
                provider=self.name.value,
                detail=f"{self.name.value} returned a body that is not JSON",
                original_exception=e,
                context={"url": url},
            )

        return self.normalize(payload)

    def normalize(self, payload: Any) -> NormalizedRecord:
        """
        Projects a decoded provider response onto NormalizedRecord.

        Values are passed through unvalidated; missing fields become empty
        strings.

        Args:
            payload: Decoded JSON body

        Returns:
            NormalizedRecord: The projected record

        Raises:
            UpstreamDecodeError: If the payload is not an object or carries none
                of the mapped fields
        """
        if not isinstance(payload, dict):
            raise UpstreamDecodeError(
                provider=self.name.value,
                detail=f"{self.name.value} returned {type(payload).__name__}, expected an object",
            )

        if not any(source in payload for source in self.FIELD_MAP):
            raise UpstreamDecodeError(
                provider=self.name.value,
                detail=f"{self.name.value} response does not match its schema",
                context={"keys": sorted(payload.keys())},
            )

        values = {field: "" for field in RECORD_FIELDS}
        for source, target in self.FIELD_MAP.items():
            value = payload.get(source)
            if value is not None:
                values[target] = str(value)

        return NormalizedRecord(source_provider=self.name, **values)

    def __repr__(self):
        return f"<{type(self).__name__}(base_url={self.base_url})>"
