import logging
from typing import List, Optional, Sequence

from core.calculator import SizingCalculator
from core.components import Circuit, PhaseLoad
from core.models import QDCCalcInput, QDCCalcResult
from standards.nbr_config import QDCConfig
from standards.nbr_tables import next_breaker_rating

logger = logging.getLogger(__name__)

class QDCCalculator(SizingCalculator[QDCCalcInput, QDCCalcResult, QDCConfig]):
    """Distribution panel (QDC): main breaker, DR, DPS, busbar and phase balancing."""

    @classmethod
    def default_config(cls) -> QDCConfig:
        return QDCConfig()

    def balance_phases(self, circuits: Sequence[Circuit]) -> List[PhaseLoad]:
        """
        Greedy largest-first round robin over the phases.

        Works on a sorted copy; the caller's sequence keeps its order.
        Not optimal, but keeps the heaviest circuits on different phases.
        """
        phases = self.config.phases
        totals = [0.0] * len(phases)
        ordered = sorted(circuits, key=lambda c: c.current, reverse=True)
        for i, circuit in enumerate(ordered):
            totals[i % len(phases)] += circuit.current
        return [PhaseLoad(phase=name, current=amps) for name, amps in zip(phases, totals)]

    @staticmethod
    def imbalance_percent(balance: Sequence[PhaseLoad]) -> float:
        # Max deviation from the mean over the mean (NEMA MG-1 definition)
        if not balance:
            return 0.0
        mean = sum(p.current for p in balance) / len(balance)
        if mean == 0:
            return 0.0
        return max(abs(p.current - mean) for p in balance) / mean * 100.0

    def calculate(self, data: QDCCalcInput) -> QDCCalcResult:
        cfg = self.config
        total = sum(c.current for c in data.circuits)

        # 0.8 diversity on the connected load
        main = next_breaker_rating(total * cfg.diversity_factor, cfg.breaker_ratings)
        if main is None:
            logger.debug("Demand %.2f A exceeds the breaker list, using %s A", total * cfg.diversity_factor, cfg.fallback_breaker)
            main = cfg.fallback_breaker

        balance = self.balance_phases(data.circuits)

        return QDCCalcResult(
            total_current=total,
            main_breaker=main,
            dr_rating=main,
            dps_rating=cfg.dps_rating,
            busbar_current=main * cfg.busbar_factor,
            phase_balance=tuple(balance),
            imbalance_percent=self.imbalance_percent(balance),
        )

def size(data: QDCCalcInput, config: Optional[QDCConfig] = None) -> QDCCalcResult:
    return QDCCalculator(config).calculate(data)
