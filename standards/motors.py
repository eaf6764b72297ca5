import logging
import math
from typing import Optional

from core.calculator import SizingCalculator, safe_div
from core.models import MotorCalcInput, MotorCalcResult, StartingMethod
from standards.nbr_config import MotorConfig
from standards.nbr_tables import next_breaker_rating

logger = logging.getLogger(__name__)

class MotorCalculator(SizingCalculator[MotorCalcInput, MotorCalcResult, MotorConfig]):
    """Three-phase induction motor: nominal/starting current, breaker, overload relay, contactor."""

    @classmethod
    def default_config(cls) -> MotorConfig:
        return MotorConfig()

    def nominal_current(self, data: MotorCalcInput) -> float:
        power_w = data.power_cv * self.config.watts_per_cv
        efficiency = data.efficiency / 100.0
        return safe_div(power_w, math.sqrt(3) * data.voltage * efficiency * data.power_factor)

    def select_contactor(self, current: float) -> str:
        for upper, contactor in self.config.contactor_bands:
            if current < upper:
                return contactor
        return self.config.largest_contactor

    def calculate(self, data: MotorCalcInput) -> MotorCalcResult:
        cfg = self.config
        i_n = self.nominal_current(data)
        # Anything unlisted starts direct-on-line
        multiplier = cfg.starting_multipliers.get(data.starting_method, cfg.starting_multipliers[StartingMethod.DIRETA])

        breaker = next_breaker_rating(i_n * cfg.breaker_factor, cfg.breaker_ratings)
        if breaker is None:
            logger.debug("In=%.2f A exceeds the breaker list, using %s A", i_n, cfg.fallback_breaker)
            breaker = cfg.fallback_breaker

        return MotorCalcResult(
            nominal_current=i_n,
            starting_current=i_n * multiplier,
            breaker=breaker,
            relay=i_n * cfg.relay_factor,
            contactor=self.select_contactor(i_n),
        )

def size(data: MotorCalcInput, config: Optional[MotorConfig] = None) -> MotorCalcResult:
    return MotorCalculator(config).calculate(data)
