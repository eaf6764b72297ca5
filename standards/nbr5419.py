import logging
from typing import Optional

from core.calculator import SizingCalculator
from core.models import SPDAInput, SPDAResult
from standards.nbr_config import SPDAConfig

logger = logging.getLogger(__name__)

class SPDACalculator(SizingCalculator[SPDAInput, SPDAResult, SPDAConfig]):
    """Lightning protection (NBR 5419): table lookup by protection level, simplified cone radius."""

    @classmethod
    def default_config(cls) -> SPDAConfig:
        return SPDAConfig()

    def calculate(self, data: SPDAInput) -> SPDAResult:
        cfg = self.config
        levels = len(cfg.down_conductor_spacing)
        level = min(max(int(data.risk_level), 1), levels)
        if level != data.risk_level:
            logger.debug("Risk level %s clamped to %s", data.risk_level, level)

        return SPDAResult(
            protection_radius=data.height * cfg.radius_factor,
            down_conductor_spacing=cfg.down_conductor_spacing[level - 1],
            grounding_ring_depth=cfg.grounding_ring_depth,
            mesh_size=cfg.mesh_sizes[level - 1],
        )

def size(data: SPDAInput, config: Optional[SPDAConfig] = None) -> SPDAResult:
    return SPDACalculator(config).calculate(data)
