from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple
from core.components import CableSpec

# NBR 5410 Tabela 36 - Copper, PVC insulation, 30 C ambient, 2 loaded conductors
# Methods: B1 (insulated conductors in conduit on wall), B2 (multicore cable in conduit),
# C (cable clipped direct). Resistance in Ohm/km.
# Must stay ascending by section: selection takes the first entry that qualifies.
CABLE_TABLE: Tuple[CableSpec, ...] = (
    CableSpec(1.5, {"B1": 17.5, "B2": 16.5, "C": 19.5}, 12.1),
    CableSpec(2.5, {"B1": 24, "B2": 23, "C": 27}, 7.41),
    CableSpec(4, {"B1": 32, "B2": 30, "C": 36}, 4.61),
    CableSpec(6, {"B1": 41, "B2": 38, "C": 46}, 3.08),
    CableSpec(10, {"B1": 57, "B2": 52, "C": 63}, 1.83),
    CableSpec(16, {"B1": 76, "B2": 69, "C": 85}, 1.15),
    CableSpec(25, {"B1": 101, "B2": 90, "C": 112}, 0.727),
    CableSpec(35, {"B1": 125, "B2": 111, "C": 138}, 0.524),
    CableSpec(50, {"B1": 151, "B2": 133, "C": 168}, 0.387),
    CableSpec(70, {"B1": 192, "B2": 168, "C": 213}, 0.268),
    CableSpec(95, {"B1": 232, "B2": 201, "C": 258}, 0.193),
    CableSpec(120, {"B1": 269, "B2": 232, "C": 299}, 0.153),
)

# A1 has no column of its own and is read through the B1 fallback.
INSTALLATION_METHODS = ("A1", "B1", "B2", "C")
DEFAULT_METHOD = "B1"

# NBR 5410 Tabela 40 - Ambient temperature correction (PVC, in air)
# Format: {Temp_C: Factor}
TEMPERATURE_FACTORS: Mapping[float, float] = MappingProxyType({
    10: 1.22,
    15: 1.17,
    20: 1.12,
    25: 1.06,
    30: 1.00,
    35: 0.94,
    40: 0.87,
    45: 0.79,
    50: 0.71,
})

# NBR 5410 Tabela 42 - Grouping of circuits (bundled)
# Format: {Circuits: Factor}
GROUPING_FACTORS: Mapping[int, float] = MappingProxyType({
    1: 1.00,
    2: 0.80,
    3: 0.70,
    4: 0.65,
    5: 0.60,
    6: 0.57,
    7: 0.54,
    8: 0.52,
    9: 0.50,
})

# Standard DIN rail breaker ratings (A), ascending
BREAKER_RATINGS: Tuple[float, ...] = (6, 10, 13, 16, 20, 25, 32, 40, 50, 63, 70, 80, 100, 125)

# Conduit trade sizes by total conductor area (mm2): the largest threshold exceeded wins.
CONDUIT_BASE_SIZE = '3/4"'
CONDUIT_THRESHOLDS: Tuple[Tuple[float, str], ...] = (
    (150, '1"'),
    (300, '1 1/4"'),
    (500, '1 1/2"'),
    (800, '2"'),
)

DEFAULT_RESISTANCE = 1.0  # Ohm/km, for sections missing from the table

def get_temp_correction(temp_c: float, table: Optional[Mapping[float, float]] = None) -> float:
    table = TEMPERATURE_FACTORS if table is None else table
    return table.get(temp_c, 1.0)

def get_grouping_factor(circuits: int, table: Optional[Mapping[int, float]] = None) -> float:
    table = GROUPING_FACTORS if table is None else table
    return table.get(circuits, 1.0)

def next_breaker_rating(amps: float, ratings: Sequence[float] = BREAKER_RATINGS) -> Optional[float]:
    """Smallest standard rating >= amps, or None when the list is exhausted."""
    for rating in ratings:
        if rating >= amps:
            return rating
    return None

def find_cable(section: float, table: Sequence[CableSpec] = CABLE_TABLE) -> Optional[CableSpec]:
    for cable in table:
        if cable.section == section:
            return cable
    return None

def conduit_for_area(total_area: float,
                     thresholds: Sequence[Tuple[float, str]] = CONDUIT_THRESHOLDS,
                     base: str = CONDUIT_BASE_SIZE) -> str:
    size = base
    for limit, trade_size in thresholds:
        if total_area > limit:
            size = trade_size
    return size
