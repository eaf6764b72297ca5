from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from core.components import BOMItem, Circuit, PhaseLoad

class SystemType(Enum):
    MONOFASICO = "monofasico"
    BIFASICO = "bifasico"
    TRIFASICO = "trifasico"

class LoadType(Enum):
    ILUMINACAO = "iluminacao"
    TOMADAS = "tomadas"
    MOTOR = "motor"
    ALIMENTADOR = "alimentador"

class ConductorMaterial(Enum):
    COBRE = "cobre"
    ALUMINIO = "aluminio"

class Insulation(Enum):
    PVC = "PVC"  # 70 C
    EPR = "EPR"  # 90 C

class BreakerCurve(Enum):
    B = "B"
    C = "C"
    D = "D"

class StartingMethod(Enum):
    DIRETA = "direta"
    ESTRELA_TRIANGULO = "estrela-triangulo"
    SOFT_STARTER = "soft-starter"

class Severity(Enum):
    ADVISORY = "advisory"
    WARNING = "warning"
    DANGER = "danger"

class SizingOutcome(Enum):
    SIZED = "sized"
    INFEASIBLE = "infeasible"

@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    code: str
    text: str

# --- Conductor sizing ---

@dataclass(frozen=True)
class CalcInput:
    system_type: SystemType
    voltage: float
    power: float  # W
    power_factor: float
    load_type: LoadType
    length: float  # m, one way
    method: str = "B1"
    temp: float = 30
    grouping: int = 1
    material: ConductorMaterial = ConductorMaterial.COBRE
    insulation: Insulation = Insulation.PVC
    breaker_curve: BreakerCurve = BreakerCurve.C
    breaker_icn: float = 3.0  # kA
    breaker_rating: float = 16  # A, proposed by the caller

    @property
    def is_three_phase(self) -> bool:
        return self.system_type == SystemType.TRIFASICO

@dataclass(frozen=True)
class CalcResult:
    current: float
    cable_section: float
    neutral_section: float
    earth_section: float
    conduit_size: str
    breaker_rating: float
    breaker_curve: BreakerCurve
    breaker_icn: float
    voltage_drop: float
    voltage_drop_percent: float
    voltage_drop_limit: float
    short_circuit_current: float
    is_voltage_conform: bool
    is_icn_conform: bool
    iz_corrected: float
    derating_factor: float
    outcome: SizingOutcome = SizingOutcome.SIZED
    diagnostics: Tuple[Diagnostic, ...] = ()
    bom: Tuple[BOMItem, ...] = ()

    @property
    def is_conform(self) -> bool:
        return self.is_voltage_conform and self.is_icn_conform

    @property
    def notes(self) -> List[str]:
        return [d.text for d in self.diagnostics]

    @property
    def bom_total(self) -> float:
        """Sum of BOM line prices, the amount used for budgets and reservations."""
        return sum(item.estimated_price for item in self.bom)

    def codes(self) -> List[str]:
        return [d.code for d in self.diagnostics]

# --- Motors ---

@dataclass(frozen=True)
class MotorCalcInput:
    power_cv: float
    voltage: float
    efficiency: float  # percent
    power_factor: float
    starting_method: StartingMethod = StartingMethod.DIRETA

@dataclass(frozen=True)
class MotorCalcResult:
    nominal_current: float
    starting_current: float
    breaker: float
    relay: float
    contactor: str

# --- Distribution panel (QDC) ---

@dataclass(frozen=True)
class QDCCalcInput:
    circuits: Tuple[Circuit, ...] = field(default_factory=tuple)

@dataclass(frozen=True)
class QDCCalcResult:
    total_current: float
    main_breaker: float
    dr_rating: float
    dps_rating: str
    busbar_current: float
    phase_balance: Tuple[PhaseLoad, ...]
    imbalance_percent: float

# --- Lightning protection (SPDA) ---

@dataclass(frozen=True)
class SPDAInput:
    height: float
    width: float
    length: float
    risk_level: int  # 1 (highest) .. 4

@dataclass(frozen=True)
class SPDAResult:
    protection_radius: float
    down_conductor_spacing: float
    grounding_ring_depth: float
    mesh_size: str

# --- Photovoltaic ---

@dataclass(frozen=True)
class SolarInput:
    monthly_consumption: float  # kWh/month
    solar_irradiation: float  # kWh/m2/day
    panel_power: float  # Wp

@dataclass(frozen=True)
class SolarResult:
    estimated_panels: int
    system_power: float  # kW
    monthly_generation: float  # kWh
    estimated_area: float  # m2
