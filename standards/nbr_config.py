"""Immutable configuration injected into each calculator.

Every constant the calculators rely on (tables, derating multipliers, price
model, efficiency assumptions) lives here, so a regional variant or a new
edition of the standard is a ``dataclasses.replace`` away::

    cheaper = replace(ConductorConfig(), prices=PriceTable(breaker=19.9))
"""
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Mapping, Tuple

from core.components import CableSpec
from core.models import ConductorMaterial, Insulation, LoadType, StartingMethod
from standards import nbr_tables

def _freeze_mappings(obj) -> None:
    """Replaces every mapping field of a frozen dataclass with a read-only copy."""
    for f in fields(obj):
        value = getattr(obj, f.name)
        if isinstance(value, Mapping):
            object.__setattr__(obj, f.name, MappingProxyType(dict(value)))

@dataclass(frozen=True)
class PriceTable:
    """Simplified unit prices (R$) used to estimate the BOM."""
    phase_cable_per_mm2_m: float = 0.5
    neutral_cable_per_mm2_m: float = 0.45
    earth_cable_per_mm2_m: float = 0.45
    breaker: float = 25.0
    conduit_per_m: float = 5.0

@dataclass(frozen=True)
class ConductorConfig:
    cable_table: Tuple[CableSpec, ...] = nbr_tables.CABLE_TABLE
    temperature_factors: Mapping[float, float] = field(hash=False, default_factory=lambda: dict(nbr_tables.TEMPERATURE_FACTORS))
    grouping_factors: Mapping[int, float] = field(hash=False, default_factory=lambda: dict(nbr_tables.GROUPING_FACTORS))
    insulation_factors: Mapping[Insulation, float] = field(hash=False, default_factory=lambda: {Insulation.EPR: 1.25})
    material_factors: Mapping[ConductorMaterial, float] = field(hash=False, default_factory=lambda: {ConductorMaterial.ALUMINIO: 0.78})
    # Resistivity ratio aluminium / copper applied to the copper resistance column
    resistance_factors: Mapping[ConductorMaterial, float] = field(hash=False, default_factory=lambda: {ConductorMaterial.ALUMINIO: 1.6})
    drop_limits: Mapping[LoadType, float] = field(hash=False, default_factory=lambda: {LoadType.ALIMENTADOR: 7.0})
    default_drop_limit: float = 4.0
    default_method: str = nbr_tables.DEFAULT_METHOD
    conduit_base_size: str = nbr_tables.CONDUIT_BASE_SIZE
    conduit_thresholds: Tuple[Tuple[float, str], ...] = nbr_tables.CONDUIT_THRESHOLDS
    reduced_neutral_above: float = 25.0
    min_reduced_neutral: float = 16.0
    parallel_current_threshold: float = 100.0
    default_resistance: float = nbr_tables.DEFAULT_RESISTANCE
    prices: PriceTable = field(default_factory=PriceTable)

    def __post_init__(self):
        object.__setattr__(self, "cable_table", tuple(self.cable_table))
        _freeze_mappings(self)

    def drop_limit(self, load_type: LoadType) -> float:
        return self.drop_limits.get(load_type, self.default_drop_limit)

@dataclass(frozen=True)
class MotorConfig:
    watts_per_cv: float = 735.5
    starting_multipliers: Mapping[StartingMethod, float] = field(hash=False, default_factory=lambda: {
        StartingMethod.DIRETA: 7.0,
        StartingMethod.ESTRELA_TRIANGULO: 2.3,
        StartingMethod.SOFT_STARTER: 3.0,
    })
    breaker_ratings: Tuple[float, ...] = nbr_tables.BREAKER_RATINGS
    breaker_factor: float = 1.25
    fallback_breaker: float = 125
    relay_factor: float = 1.1
    # (upper bound exclusive, contactor); currents past the last band use largest_contactor
    contactor_bands: Tuple[Tuple[float, str], ...] = ((9, "CWM9"), (12, "CWM12"), (18, "CWM18"))
    largest_contactor: str = "CWM25"

    def __post_init__(self):
        _freeze_mappings(self)

@dataclass(frozen=True)
class QDCConfig:
    breaker_ratings: Tuple[float, ...] = nbr_tables.BREAKER_RATINGS
    diversity_factor: float = 0.8
    fallback_breaker: float = 125
    dps_rating: str = "20kA / 275V"
    busbar_factor: float = 1.25
    phases: Tuple[str, ...] = ("R", "S", "T")

@dataclass(frozen=True)
class SPDAConfig:
    # Indexed by protection level I..IV
    down_conductor_spacing: Tuple[float, ...] = (10, 15, 20, 25)
    mesh_sizes: Tuple[str, ...] = ("5x5m", "10x10m", "15x15m", "20x20m")
    radius_factor: float = 1.5
    grounding_ring_depth: float = 0.5

@dataclass(frozen=True)
class SolarConfig:
    days_per_month: int = 30
    system_efficiency: float = 0.8
    area_per_panel: float = 2.0  # m2
