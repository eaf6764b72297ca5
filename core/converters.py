import math
import re
from enum import Enum
from typing import Any, Mapping, Optional, Tuple, Type, TypeVar

from core.components import Circuit
from core.models import (
    BreakerCurve, CalcInput, ConductorMaterial, Insulation, LoadType, MotorCalcInput,
    QDCCalcInput, SolarInput, SPDAInput, StartingMethod, SystemType,
)
from standards.nbr_tables import INSTALLATION_METHODS

E = TypeVar("E", bound=Enum)

WATTS_PER_CV = 735.5

class InvalidInputError(ValueError):
    """Raised by the boundary decoders; the engine itself never validates."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field

def convert_power_unit(val: float, unit: str, voltage: float, phases: int, pf: float) -> Tuple[float, Optional[float]]:
    """
    Converts input value to (Watts, Amps_Override).
    Only metric units are accepted; CV is the metric horsepower.
    """
    unit = unit.strip().upper()

    # 1. Active power
    if unit == "W": return (val, None)
    if unit == "KW": return (val * 1000.0, None)
    if unit == "MW": return (val * 1000000.0, None)
    if unit == "CV": return (val * WATTS_PER_CV, None)

    # 2. Current
    if unit == "A":
        factor = math.sqrt(3) if phases == 3 else 1.0
        watts = val * voltage * factor * pf
        return (watts, val)

    # 3. Apparent power
    if unit == "VA": return (val * pf, None)
    if unit == "KVA": return (val * 1000.0 * pf, None)

    raise InvalidInputError("unidade", f"unidade de potência não suportada: {unit!r}")

def convert_length_unit(val: float, unit: str) -> float:
    """Returns length in meters."""
    unit = unit.strip().lower()
    if unit in ["m", "mts", "metros", "metro"]: return val
    if unit in ["km"]: return val * 1000.0
    if unit in ["cm"]: return val / 100.0
    raise InvalidInputError("unidade", f"unidade de comprimento não suportada: {unit!r}")

def parse_quantity(text: str, default_unit: str) -> Tuple[float, str]:
    """Splits '10 kW' / '50m' / '12.5' into (value, unit)."""
    text = text.strip().replace(",", ".")
    match = re.match(r"^([0-9]*\.?[0-9]+)\s*([a-zA-Z]*)$", text)
    if not match:
        raise InvalidInputError("valor", f"não foi possível interpretar {text!r}")
    return float(match.group(1)), (match.group(2) or default_unit)

# --- Dict decoders (camelCase keys, as sent by clients) ---

def _enum(enum_cls: Type[E], raw: Any, field: str) -> E:
    if isinstance(raw, enum_cls):
        return raw
    for member in enum_cls:
        if str(raw).strip().lower() in (member.value.lower(), member.name.lower()):
            return member
    allowed = ", ".join(m.value for m in enum_cls)
    raise InvalidInputError(field, f"valor {raw!r} inválido (use {allowed})")

def _number(data: Mapping[str, Any], key: str, default: Any = None, positive: bool = False,
            minimum: Optional[float] = None, maximum: Optional[float] = None) -> float:
    raw = data.get(key, default)
    if raw is None:
        raise InvalidInputError(key, "campo obrigatório")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidInputError(key, f"número inválido: {raw!r}")
    if math.isnan(value) or math.isinf(value):
        raise InvalidInputError(key, "número inválido")
    if positive and value <= 0:
        raise InvalidInputError(key, "deve ser maior que zero")
    if minimum is not None and value < minimum:
        raise InvalidInputError(key, f"deve ser >= {minimum:g}")
    if maximum is not None and value > maximum:
        raise InvalidInputError(key, f"deve ser <= {maximum:g}")
    return value

def _integer(data: Mapping[str, Any], key: str, default: Any = None,
             minimum: Optional[float] = None, maximum: Optional[float] = None) -> int:
    value = _number(data, key, default, minimum=minimum, maximum=maximum)
    if value != int(value):
        raise InvalidInputError(key, f"deve ser inteiro: {data.get(key)!r}")
    return int(value)

def calc_input_from_dict(data: Mapping[str, Any]) -> CalcInput:
    method = str(data.get("method", "B1")).strip().upper()
    if method not in INSTALLATION_METHODS:
        raise InvalidInputError("method", f"método de instalação {method!r} não suportado")

    return CalcInput(
        system_type=_enum(SystemType, data.get("systemType"), "systemType"),
        voltage=_number(data, "voltage", positive=True),
        power=_number(data, "power", minimum=0),
        power_factor=_number(data, "powerFactor", 1.0, positive=True, maximum=1.0),
        load_type=_enum(LoadType, data.get("loadType"), "loadType"),
        length=_number(data, "length", positive=True),
        method=method,
        temp=_number(data, "temp", 30),
        grouping=_integer(data, "grouping", 1, minimum=1),
        material=_enum(ConductorMaterial, data.get("material", "cobre"), "material"),
        insulation=_enum(Insulation, data.get("insulation", "PVC"), "insulation"),
        breaker_curve=_enum(BreakerCurve, data.get("breakerCurve", "C"), "breakerCurve"),
        breaker_icn=_number(data, "breakerIcn", 3.0, positive=True),
        breaker_rating=_number(data, "breakerRating", positive=True),
    )

def motor_input_from_dict(data: Mapping[str, Any]) -> MotorCalcInput:
    return MotorCalcInput(
        power_cv=_number(data, "powerCV", positive=True),
        voltage=_number(data, "voltage", positive=True),
        efficiency=_number(data, "efficiency", positive=True, maximum=100),
        power_factor=_number(data, "powerFactor", positive=True, maximum=1.0),
        starting_method=_enum(StartingMethod, data.get("startingMethod", "direta"), "startingMethod"),
    )

def qdc_input_from_dict(data: Mapping[str, Any]) -> QDCCalcInput:
    circuits = []
    for i, raw in enumerate(data.get("circuits") or []):
        if not isinstance(raw, Mapping):
            raise InvalidInputError(f"circuits[{i}]", f"circuito inválido: {raw!r}")
        circuits.append(Circuit(
            id=_integer(raw, "id", i + 1),
            current=_number(raw, "current", minimum=0),
            type=raw.get("type"),
        ))
    return QDCCalcInput(circuits=tuple(circuits))

def spda_input_from_dict(data: Mapping[str, Any]) -> SPDAInput:
    level = _integer(data, "riskLevel", minimum=1, maximum=4)
    return SPDAInput(
        height=_number(data, "height", positive=True),
        width=_number(data, "width", positive=True),
        length=_number(data, "length", positive=True),
        risk_level=level,
    )

def solar_input_from_dict(data: Mapping[str, Any]) -> SolarInput:
    return SolarInput(
        monthly_consumption=_number(data, "monthlyConsumption", minimum=0),
        solar_irradiation=_number(data, "solarIrradiation", positive=True),
        panel_power=_number(data, "panelPower", positive=True),
    )
