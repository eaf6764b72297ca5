import argparse
import datetime
import logging

from core.converters import (
    InvalidInputError, calc_input_from_dict, convert_length_unit, convert_power_unit,
    motor_input_from_dict, parse_quantity, qdc_input_from_dict, solar_input_from_dict,
    spda_input_from_dict,
)
from core.models import SystemType
from core.reports import read_circuits, write_memorial
from standards import motors, nbr5410, nbr5419, qdc, solar

SYSTEMS = {"1": "monofasico", "2": "bifasico", "3": "trifasico"}
LOADS = {"1": "iluminacao", "2": "tomadas", "3": "motor", "4": "alimentador"}
STARTS = {"1": "direta", "2": "estrela-triangulo", "3": "soft-starter"}

def ask(prompt: str, default=None) -> str:
    suffix = f" [{default}]" if default is not None else ""
    answer = input(f"{prompt}{suffix}: ").strip()
    if not answer and default is not None:
        return str(default)
    return answer

def ask_choice(prompt: str, options: dict, default: str = "1") -> str:
    labels = "  ".join(f"({k}) {v}" for k, v in options.items())
    print(labels)
    return options.get(ask(prompt, default), options[default])

def get_conductor_input():
    print("\n--- Dimensionamento de Condutores (NBR 5410) ---")
    system = ask_choice("Sistema", SYSTEMS, "1")
    phases = 3 if system == SystemType.TRIFASICO.value else 1

    voltage = float(ask("Tensão (V)", 220 if phases == 1 else 380))
    pf = float(ask("Fator de Potência", 0.92))
    p_val, p_unit = parse_quantity(ask("Potência (ex: 1200 W, 5 kW, 3 CV, 20 A, 2 kVA)"), "W")
    watts, _ = convert_power_unit(p_val, p_unit, voltage, phases, pf)
    l_val, l_unit = parse_quantity(ask("Comprimento do circuito (ex: 25 m)"), "m")

    raw = {
        "systemType": system,
        "voltage": voltage,
        "power": watts,
        "powerFactor": pf,
        "loadType": ask_choice("Tipo de carga", LOADS, "2"),
        "length": convert_length_unit(l_val, l_unit),
        "method": ask("Método de instalação (A1, B1, B2, C)", "B1"),
        "temp": float(ask("Temperatura ambiente (°C)", 30)),
        "grouping": int(ask("Circuitos agrupados", 1)),
        "material": ask("Material (cobre/aluminio)", "cobre"),
        "insulation": ask("Isolação (PVC/EPR)", "PVC"),
        "breakerCurve": ask("Curva do disjuntor (B/C/D)", "C"),
        "breakerIcn": float(ask("Capacidade de interrupção (kA)", 3)),
        "breakerRating": float(ask("Corrente nominal do disjuntor (A)", 16)),
    }
    return calc_input_from_dict(raw)

def run_conductors():
    data = get_conductor_input()
    res = nbr5410.size(data)

    print("-" * 80)
    print(f"Corrente de projeto (Ib):  {res.current:.2f} A")
    print(f"Fator de correção:         {res.derating_factor:.3f}")
    print(f"Seção fase/neutro/terra:   {res.cable_section:g} / {res.neutral_section:g} / {res.earth_section:g} mm²")
    print(f"Iz corrigida:              {res.iz_corrected:.2f} A")
    print(f"Queda de tensão:           {res.voltage_drop:.2f} V ({res.voltage_drop_percent:.2f}% / limite {res.voltage_drop_limit:g}%)")
    print(f"Icc presumida:             {res.short_circuit_current:.0f} A")
    print(f"Eletroduto:                {res.conduit_size}")
    print(f"Conforme:                  {'SIM' if res.is_conform else 'NÃO'} ({res.outcome.value})")
    for d in res.diagnostics:
        print(f"  [{d.severity.value.upper()}] {d.text}")
    print("-" * 80)
    print(f"{'Item':<50} | {'Qtd':<8} | {'R$':>8}")
    for item in res.bom:
        print(f"{item.item:<50} | {item.quantity:<8} | {item.estimated_price:>8.2f}")
    print(f"{'Total Estimado':<50} | {'':<8} | {res.bom_total:>8.2f}")

    if ask("\nExportar memorial para Excel? (s/n)", "n").lower() == "s":
        filename = f"Memorial_NBR5410_{datetime.datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
        write_memorial(filename, data, res)
        print(f"\n[INFO] Excel gerado: {filename}")

def run_motor():
    print("\n--- Motores ---")
    data = motor_input_from_dict({
        "powerCV": ask("Potência (CV)"),
        "voltage": ask("Tensão (V)", 380),
        "efficiency": ask("Rendimento (%)", 85),
        "powerFactor": ask("Fator de Potência", 0.8),
        "startingMethod": ask_choice("Partida", STARTS, "1"),
    })
    res = motors.size(data)
    print(f"Corrente nominal:  {res.nominal_current:.2f} A")
    print(f"Corrente partida:  {res.starting_current:.2f} A")
    print(f"Disjuntor:         {res.breaker:g} A")
    print(f"Relé térmico:      {res.relay:.2f} A")
    print(f"Contator:          {res.contactor}")

def run_qdc():
    print("\n--- Quadro de Distribuição (QDC) ---")
    source = ask("Planilha de circuitos (.xlsx) ou Enter para digitar", "")
    if source:
        circuits = [{"id": c.id, "current": c.current, "type": c.type} for c in read_circuits(source)]
    else:
        circuits = []
        while True:
            text = ask(f"Corrente do circuito {len(circuits) + 1} (A, Enter encerra)", "")
            if not text:
                break
            circuits.append({"id": len(circuits) + 1, "current": text})
    res = qdc.size(qdc_input_from_dict({"circuits": circuits}))
    print(f"Corrente total:    {res.total_current:.2f} A")
    print(f"Disjuntor geral:   {res.main_breaker:g} A")
    print(f"DR:                {res.dr_rating:g} A")
    print(f"DPS:               {res.dps_rating}")
    print(f"Barramento:        {res.busbar_current:.2f} A")
    for p in res.phase_balance:
        print(f"  Fase {p.phase}: {p.current:.2f} A")
    print(f"Desequilíbrio:     {res.imbalance_percent:.1f}%")

def run_spda():
    print("\n--- SPDA (NBR 5419) ---")
    res = nbr5419.size(spda_input_from_dict({
        "height": ask("Altura (m)"),
        "width": ask("Largura (m)"),
        "length": ask("Comprimento (m)"),
        "riskLevel": ask("Nível de proteção (1-4)", 3),
    }))
    print(f"Raio de proteção:        {res.protection_radius:.2f} m")
    print(f"Espaçamento descidas:    {res.down_conductor_spacing:g} m")
    print(f"Malha captora:           {res.mesh_size}")
    print(f"Profundidade do anel:    {res.grounding_ring_depth:g} m")

def run_solar():
    print("\n--- Energia Solar ---")
    res = solar.size(solar_input_from_dict({
        "monthlyConsumption": ask("Consumo mensal (kWh)"),
        "solarIrradiation": ask("Irradiação (kWh/m²/dia)", 5),
        "panelPower": ask("Potência do painel (Wp)", 550),
    }))
    print(f"Potência do sistema:     {res.system_power:.2f} kWp")
    print(f"Painéis:                 {res.estimated_panels}")
    print(f"Geração mensal:          {res.monthly_generation:.0f} kWh")
    print(f"Área estimada:           {res.estimated_area:g} m²")

MENU = {
    "1": ("Condutores", run_conductors),
    "2": ("Motores", run_motor),
    "3": ("QDC", run_qdc),
    "4": ("SPDA", run_spda),
    "5": ("Solar", run_solar),
}

def main(argv=None):
    parser = argparse.ArgumentParser(description="Dimensionamento de instalações elétricas (NBR 5410)")
    parser.add_argument("-v", "--verbose", action="store_true", help="mostra o passo a passo do cálculo")
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    print("==========================================================")
    print(" DIMENSIONAMENTO ELÉTRICO (NBR 5410)")
    print("==========================================================")

    while True:
        print()
        for key, (label, _) in MENU.items():
            print(f"({key}) {label}")
        choice = ask("Opção (Enter sai)", "")
        if not choice:
            break
        if choice not in MENU:
            print("Opção inválida.")
            continue
        try:
            MENU[choice][1]()
        except InvalidInputError as e:
            print(f"Erro em entrada de dados ({e.field}): {e}. Tente novamente.")
        except ValueError as e:
            print(f"Erro em entrada de dados: {e}. Tente novamente.")
        except OSError as e:
            print(f"Erro ao abrir arquivo: {e}. Tente novamente.")

if __name__ == "__main__":
    main()
