import math
from abc import ABC, abstractmethod
from typing import Generic, Iterable, List, Optional, TypeVar

InputT = TypeVar("InputT")
ResultT = TypeVar("ResultT")
ConfigT = TypeVar("ConfigT")

def safe_div(numerator: float, denominator: float) -> float:
    """Division that maps a zero denominator to inf instead of raising."""
    if denominator == 0:
        return math.inf if numerator >= 0 else -math.inf
    return numerator / denominator

class SizingCalculator(ABC, Generic[InputT, ResultT, ConfigT]):

    def __init__(self, config: Optional[ConfigT] = None):
        self.config = config if config is not None else self.default_config()

    @classmethod
    @abstractmethod
    def default_config(cls) -> ConfigT:
        """Returns the configuration used when none is injected."""
        pass

    @abstractmethod
    def calculate(self, data: InputT) -> ResultT:
        """Sizes one input record. Must not mutate the input or the configuration."""
        pass

    def calculate_many(self, inputs: Iterable[InputT]) -> List[ResultT]:
        """Sizes a batch of independent inputs, preserving their order."""
        return [self.calculate(data) for data in inputs]
