import math
from typing import Optional

from core.calculator import SizingCalculator
from core.models import SolarInput, SolarResult
from standards.nbr_config import SolarConfig

class SolarCalculator(SizingCalculator[SolarInput, SolarResult, SolarConfig]):
    """Grid-tied PV estimate from the monthly bill."""

    @classmethod
    def default_config(cls) -> SolarConfig:
        return SolarConfig()

    def calculate(self, data: SolarInput) -> SolarResult:
        cfg = self.config
        if data.solar_irradiation <= 0 or data.panel_power <= 0:
            return SolarResult(estimated_panels=0, system_power=0.0, monthly_generation=0.0, estimated_area=0.0)

        daily = data.monthly_consumption / cfg.days_per_month
        system_kw = (daily / data.solar_irradiation) / cfg.system_efficiency
        panels = math.ceil((system_kw * 1000) / data.panel_power)

        return SolarResult(
            estimated_panels=panels,
            system_power=system_kw,
            monthly_generation=system_kw * data.solar_irradiation * cfg.days_per_month * cfg.system_efficiency,
            estimated_area=panels * cfg.area_per_panel,
        )

def size(data: SolarInput, config: Optional[SolarConfig] = None) -> SolarResult:
    return SolarCalculator(config).calculate(data)
