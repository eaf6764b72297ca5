import logging
from typing import Sequence

from core.calculator import safe_div
from core.components import CableSpec
from standards.nbr_tables import CABLE_TABLE, DEFAULT_RESISTANCE, find_cable

logger = logging.getLogger(__name__)

def estimate(voltage: float, length: float, section: float,
             table: Sequence[CableSpec] = CABLE_TABLE,
             default_resistance: float = DEFAULT_RESISTANCE) -> float:
    """
    Prospective short-circuit current (A) at the end of the circuit.

    Single-impedance model: only the conductor resistance of ``length`` metres
    limits the fault, so the result is an upper bound that errs on the side of
    a larger breaking capacity. Returns inf for a zero-length run.
    """
    cable = find_cable(section, table)
    if cable is None:
        logger.debug("Section %s mm2 not tabulated, using %s Ohm/km", section, default_resistance)
        r_km = default_resistance
    else:
        r_km = cable.resistance

    r_total = r_km * (length / 1000.0)
    return safe_div(voltage, r_total)
