"""
Feature Results
===============

Three-outcome result type for lazily extracted frame features.

Outcomes:
    NOT_COMPUTED: The feature was never loaded (caller passed
                  load_if_not_loaded=False before any load)
    UNKNOWN:      The feature was computed but could not be recognized
                  (e.g. next box matches no template, digits unreadable)
    KNOWN:        The feature was computed to a concrete value

NOT_COMPUTED and UNKNOWN are never conflated. UNKNOWN is a normal value that
lifecycle states interpret; it is not an error.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar


T = TypeVar("T")


class FeatureStatus(str, Enum):
    """Outcome of a feature lookup."""

    NOT_COMPUTED = "NOT_COMPUTED"
    UNKNOWN = "UNKNOWN"
    KNOWN = "KNOWN"


@dataclass(frozen=True)
class Feature(Generic[T]):
    """
    Result of a feature accessor.

    Attributes:
        status: Which of the three outcomes this is
        value: The concrete value when status is KNOWN, else None
    """

    status: FeatureStatus
    value: Optional[T] = None

    @classmethod
    def not_computed(cls) -> "Feature[T]":
        return cls(FeatureStatus.NOT_COMPUTED)

    @classmethod
    def unknown(cls) -> "Feature[T]":
        return cls(FeatureStatus.UNKNOWN)

    @classmethod
    def known(cls, value: T) -> "Feature[T]":
        return cls(FeatureStatus.KNOWN, value)

    @property
    def is_computed(self) -> bool:
        return self.status != FeatureStatus.NOT_COMPUTED

    @property
    def is_known(self) -> bool:
        return self.status == FeatureStatus.KNOWN

    @property
    def is_unknown(self) -> bool:
        return self.status == FeatureStatus.UNKNOWN

    def __repr__(self) -> str:
        if self.is_known:
            return f"Feature(KNOWN, {self.value!r})"
        return f"Feature({self.status.value})"


class FeatureSlot(Generic[T]):
    """
    Write-once cache slot backed by a compute function.

    The compute function returns the value, or None when the feature is
    computed but unrecognized. It runs at most once per slot; if it raises,
    the slot stays NOT_COMPUTED and the error propagates.

    Example:
        slot = FeatureSlot(lambda: expensive())
        slot.get(load_if_not_loaded=False)  # Feature(NOT_COMPUTED)
        slot.get()                          # computes and caches
    """

    __slots__ = ("_compute", "_result", "compute_count")

    def __init__(self, compute: Callable[[], Optional[T]]) -> None:
        self._compute = compute
        self._result: Feature[T] = Feature.not_computed()
        self.compute_count: int = 0

    def get(self, load_if_not_loaded: bool = True) -> Feature[T]:
        if self._result.is_computed or not load_if_not_loaded:
            return self._result

        self.compute_count += 1
        value = self._compute()
        self._result = Feature.unknown() if value is None else Feature.known(value)
        return self._result
