from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

@dataclass(frozen=True)
class CableSpec:
    section: float  # mm2
    capacity: Mapping[str, float] = field(hash=False)  # installation method -> A
    resistance: float  # Ohm/km, copper

    def __post_init__(self):
        # read-only view over a private copy
        object.__setattr__(self, "capacity", MappingProxyType(dict(self.capacity)))

    def ampacity(self, method: str, fallback: str = "B1") -> float:
        if method in self.capacity:
            return self.capacity[method]
        return self.capacity[fallback]

@dataclass(frozen=True)
class Circuit:
    id: int
    current: float
    type: Optional[str] = None

@dataclass(frozen=True)
class PhaseLoad:
    phase: str
    current: float

@dataclass(frozen=True)
class BOMItem:
    item: str
    quantity: str
    estimated_price: float
