from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cep_service.domain.models.address import NormalizedRecord


class OutcomeKind(str, Enum):
    """Enum defining the possible results of a single race."""
    RECORD = "record"
    TIMEOUT = "timeout"
    INVALID = "invalid"


@dataclass(frozen=True)
class RaceOutcome:
    """
    Result of one race: a winning record, a timeout, or an invalid input.

    Build instances through the classmethods so that `record` is set exactly
    when `kind` is RECORD.
    """

    kind: OutcomeKind
    record: Optional[NormalizedRecord] = None

    def __post_init__(self):
        if (self.kind is OutcomeKind.RECORD) != (self.record is not None):
            raise ValueError(f"RaceOutcome of kind {self.kind!r} with record={self.record!r}")

    @classmethod
    def of(cls, record: NormalizedRecord) -> "RaceOutcome":
        return cls(kind=OutcomeKind.RECORD, record=record)

    @classmethod
    def timeout(cls) -> "RaceOutcome":
        return cls(kind=OutcomeKind.TIMEOUT)

    @classmethod
    def invalid(cls) -> "RaceOutcome":
        return cls(kind=OutcomeKind.INVALID)

    @property
    def is_record(self) -> bool:
        return self.kind is OutcomeKind.RECORD
