import logging
import math
from typing import List, Optional, Tuple

from core.calculator import SizingCalculator, safe_div
from core.components import BOMItem, CableSpec
from core.models import (
    BreakerCurve, CalcInput, CalcResult, Diagnostic, LoadType,
    Severity, SizingOutcome,
)
from standards import short_circuit
from standards.nbr_config import ConductorConfig
from standards.nbr_tables import conduit_for_area, get_grouping_factor, get_temp_correction

logger = logging.getLogger(__name__)

def _fmt(value: float) -> str:
    # 1.5 -> "1.5", 16.0 -> "16", 2469135.5 -> "2469135.5"
    return f"{value:.10g}"

class ConductorCalculator(SizingCalculator[CalcInput, CalcResult, ConductorConfig]):
    """
    Branch circuit sizing per NBR 5410 (simplified).

    The phase section must satisfy Ib <= In <= Iz for the breaker proposed by
    the caller and keep the voltage drop under the limit for the load type.
    Nothing here raises for bad engineering data: violations are reported
    through the conformity flags, the diagnostics and ``outcome``.
    """

    @classmethod
    def default_config(cls) -> ConductorConfig:
        return ConductorConfig()

    # --- Step 1: design current ---

    @staticmethod
    def calculate_design_current(data: CalcInput) -> float:
        if data.is_three_phase:
            return safe_div(data.power, math.sqrt(3) * data.voltage * data.power_factor)
        return safe_div(data.power, data.voltage * data.power_factor)

    # --- Step 2: derating ---

    def derating_factor(self, data: CalcInput) -> float:
        cfg = self.config
        f_temp = get_temp_correction(data.temp, cfg.temperature_factors)
        f_group = get_grouping_factor(data.grouping, cfg.grouping_factors)
        f_insulation = cfg.insulation_factors.get(data.insulation, 1.0)
        f_material = cfg.material_factors.get(data.material, 1.0)
        return f_temp * f_group * f_insulation * f_material

    def corrected_ampacity(self, cable: CableSpec, method: str, f_total: float) -> float:
        return cable.ampacity(method, self.config.default_method) * f_total

    # --- Step 3: ampacity criterion ---

    def select_cable(self, min_iz: float, method: str, f_total: float) -> Tuple[int, bool]:
        """Index of the smallest cable with Iz >= min_iz, and whether one was found."""
        table = self.config.cable_table
        for idx, cable in enumerate(table):
            if self.corrected_ampacity(cable, method, f_total) >= min_iz:
                return idx, True
        logger.debug("No section reaches Iz >= %.2f A, falling back to %s mm2", min_iz, table[-1].section)
        return len(table) - 1, False

    # --- Step 4: voltage drop ---

    def voltage_drop(self, cable: CableSpec, data: CalcInput, current: float) -> Tuple[float, float]:
        """Returns (volts, percent of the supply voltage)."""
        r_km = cable.resistance * self.config.resistance_factors.get(data.material, 1.0)
        k = math.sqrt(3) if data.is_three_phase else 2.0
        dv = (k * data.length * current * r_km) / 1000.0
        return dv, safe_div(dv, data.voltage) * 100.0

    # --- Steps 5-7: neutral, earth, conduit ---

    def neutral_section(self, phase_section: float, data: CalcInput) -> float:
        # NBR 5410 6.2.6.2.6: reduced neutral only on balanced three-phase circuits
        cfg = self.config
        if data.is_three_phase and phase_section > cfg.reduced_neutral_above:
            return max(phase_section / 2, cfg.min_reduced_neutral)
        return phase_section

    @staticmethod
    def earth_section(phase_section: float) -> float:
        # NBR 5410 Tabela 58
        if phase_section <= 16:
            return phase_section
        if phase_section <= 35:
            return 16
        return phase_section / 2

    def conduit_size(self, phase_section: float, neutral: float, earth: float, data: CalcInput) -> str:
        conductors = 3 if data.is_three_phase else 2
        total_area = phase_section * conductors + neutral + earth
        return conduit_for_area(total_area, self.config.conduit_thresholds, self.config.conduit_base_size)

    # --- Full calculation ---

    def calculate(self, data: CalcInput) -> CalcResult:
        cfg = self.config
        table = cfg.cable_table

        ib = self.calculate_design_current(data)
        f_total = self.derating_factor(data)
        breaker = data.breaker_rating

        idx, ampacity_found = self.select_cable(breaker, data.method, f_total)
        dv, dv_percent = self.voltage_drop(table[idx], data, ib)

        limit = cfg.drop_limit(data.load_type)
        while dv_percent > limit and idx < len(table) - 1:
            idx += 1
            dv, dv_percent = self.voltage_drop(table[idx], data, ib)
        logger.debug("Ib=%.2f A, fTotal=%.3f, section=%s mm2, dV=%.2f%%", ib, f_total, table[idx].section, dv_percent)

        cable = table[idx]
        iz = self.corrected_ampacity(cable, data.method, f_total)
        neutral = self.neutral_section(cable.section, data)
        earth = self.earth_section(cable.section)
        conduit = self.conduit_size(cable.section, neutral, earth, data)

        isc = short_circuit.estimate(data.voltage, data.length, cable.section, table, cfg.default_resistance)

        drop_ok = dv_percent <= limit
        is_voltage_conform = drop_ok and breaker <= iz
        is_icn_conform = data.breaker_icn * 1000 >= isc

        feasible = ampacity_found and drop_ok
        outcome = SizingOutcome.SIZED if feasible else SizingOutcome.INFEASIBLE

        diagnostics = self.build_diagnostics(data, ib, iz, dv_percent, limit, isc, is_icn_conform, feasible)
        bom = self.build_bom(data, cable.section, neutral, earth, conduit)

        return CalcResult(
            current=ib,
            cable_section=cable.section,
            neutral_section=neutral,
            earth_section=earth,
            conduit_size=conduit,
            breaker_rating=breaker,
            breaker_curve=data.breaker_curve,
            breaker_icn=data.breaker_icn,
            voltage_drop=dv,
            voltage_drop_percent=dv_percent,
            voltage_drop_limit=limit,
            short_circuit_current=isc,
            is_voltage_conform=is_voltage_conform,
            is_icn_conform=is_icn_conform,
            iz_corrected=iz,
            derating_factor=f_total,
            outcome=outcome,
            diagnostics=tuple(diagnostics),
            bom=tuple(bom),
        )

    def build_diagnostics(self, data: CalcInput, ib: float, iz: float, dv_percent: float, limit: float,
                          isc: float, is_icn_conform: bool, feasible: bool) -> List[Diagnostic]:
        breaker = data.breaker_rating
        notes: List[Diagnostic] = []

        if dv_percent > limit:
            notes.append(Diagnostic(
                Severity.WARNING, "VOLTAGE_DROP_EXCEEDED",
                f"Aviso: queda de tensão de {dv_percent:.2f}% acima do limite de {_fmt(limit)}% (NBR 5410), "
                f"mesmo com a maior seção disponível."))
        if breaker > iz:
            notes.append(Diagnostic(
                Severity.DANGER, "BREAKER_ABOVE_AMPACITY",
                f"Erro: disjuntor de {_fmt(breaker)}A acima da capacidade corrigida do cabo ({iz:.2f}A). "
                f"O condutor não fica protegido contra sobrecarga."))
        if breaker < ib:
            notes.append(Diagnostic(
                Severity.WARNING, "BREAKER_BELOW_DESIGN_CURRENT",
                f"Aviso: disjuntor de {_fmt(breaker)}A abaixo da corrente de projeto ({ib:.2f}A). "
                f"Haverá desarmes em operação normal."))
        if not is_icn_conform:
            notes.append(Diagnostic(
                Severity.DANGER, "ICN_INSUFFICIENT",
                f"Perigo: corrente de curto-circuito presumida ({isc:.0f}A) acima da capacidade de interrupção "
                f"do disjuntor ({_fmt(data.breaker_icn)}kA)."))

        curve_note = self.curve_advisory(data.load_type, data.breaker_curve)
        if curve_note is not None:
            notes.append(curve_note)

        if ib > self.config.parallel_current_threshold:
            notes.append(Diagnostic(
                Severity.ADVISORY, "PARALLEL_CONDUCTORS",
                f"Corrente elevada (>{_fmt(self.config.parallel_current_threshold)}A): avalie barramento "
                f"ou condutores em paralelo."))

        if not feasible:
            notes.append(Diagnostic(
                Severity.DANGER, "SIZING_INFEASIBLE",
                "Erro: nenhuma seção padronizada atende simultaneamente capacidade de condução e queda de tensão; "
                "o resultado usa a maior seção da tabela."))
        return notes

    @staticmethod
    def curve_advisory(load_type: LoadType, curve: BreakerCurve) -> Optional[Diagnostic]:
        if load_type == LoadType.MOTOR and curve == BreakerCurve.B:
            return Diagnostic(
                Severity.ADVISORY, "CURVE_MOTOR_B",
                "Recomendação: para motores use curva C ou D, evitando disparos na partida.")
        if load_type == LoadType.ILUMINACAO and curve == BreakerCurve.D:
            return Diagnostic(
                Severity.ADVISORY, "CURVE_LIGHTING_D",
                "Recomendação: para iluminação prefira curva B ou C; a curva D pode não atuar em curtos de baixa intensidade.")
        if load_type == LoadType.TOMADAS and curve == BreakerCurve.B:
            return Diagnostic(
                Severity.ADVISORY, "CURVE_SOCKETS_B",
                "Observação: em tomadas a curva B é sensível a picos de partida; sugere-se curva C.")
        return None

    def build_bom(self, data: CalcInput, section: float, neutral: float, earth: float, conduit: str) -> List[BOMItem]:
        prices = self.config.prices
        length = data.length
        conductors = 3 if data.is_three_phase else 2
        material = data.material.value.upper()

        return [
            BOMItem(f"Cabo Flexível {_fmt(section)}mm² {material} {data.insulation.value}",
                    f"{_fmt(length * conductors)}m",
                    length * section * prices.phase_cable_per_mm2_m),
            BOMItem(f"Cabo Flexível {_fmt(neutral)}mm² (Neutro) Azul",
                    f"{_fmt(length)}m",
                    length * neutral * prices.neutral_cable_per_mm2_m),
            BOMItem(f"Cabo Flexível {_fmt(earth)}mm² (Terra) Verde",
                    f"{_fmt(length)}m",
                    length * earth * prices.earth_cable_per_mm2_m),
            BOMItem(f"Disjuntor DIN {_fmt(data.breaker_rating)}A Curva {data.breaker_curve.value} {_fmt(data.breaker_icn)}kA",
                    "1 un",
                    prices.breaker),
            BOMItem(f"Eletroduto Corrugado Reforçado {conduit}",
                    f"{_fmt(length)}m",
                    length * prices.conduit_per_m),
        ]

def size(data: CalcInput, config: Optional[ConductorConfig] = None) -> CalcResult:
    return ConductorCalculator(config).calculate(data)
