import io
from typing import BinaryIO, List, Union

import pandas as pd
from openpyxl.styles import Font, PatternFill

from core.components import Circuit
from core.converters import InvalidInputError
from core.models import CalcInput, CalcResult
from standards.nbr_tables import CABLE_TABLE

CIRCUIT_COLUMNS = ["Id", "Corrente", "Tipo"]

HEADER_FILL = PatternFill(start_color="DDDDDD", end_color="DDDDDD", fill_type="solid")
HEADER_FONT = Font(bold=True)

def _yes_no(flag: bool) -> str:
    return "SIM" if flag else "NÃO"

def bom_frame(result: CalcResult) -> pd.DataFrame:
    return pd.DataFrame(
        [{"Item": b.item, "Quantidade": b.quantity, "Preço Estimado (R$)": round(b.estimated_price, 2)}
         for b in result.bom],
        columns=["Item", "Quantidade", "Preço Estimado (R$)"],
    )

def diagnostics_frame(result: CalcResult) -> pd.DataFrame:
    return pd.DataFrame(
        [{"Severidade": d.severity.value, "Código": d.code, "Mensagem": d.text} for d in result.diagnostics],
        columns=["Severidade", "Código", "Mensagem"],
    )

def conductor_frame(data: CalcInput, result: CalcResult) -> pd.DataFrame:
    rows = [
        ("Sistema", data.system_type.value),
        ("Tensão (V)", data.voltage),
        ("Potência (W)", data.power),
        ("Fator de Potência", data.power_factor),
        ("Tipo de Carga", data.load_type.value),
        ("Comprimento (m)", data.length),
        ("Método de Instalação", data.method),
        ("Temperatura Ambiente (°C)", data.temp),
        ("Circuitos Agrupados", data.grouping),
        ("Material / Isolação", f"{data.material.value} / {data.insulation.value}"),
        ("Corrente de Projeto Ib (A)", round(result.current, 2)),
        ("Fator de Correção Total", round(result.derating_factor, 3)),
        ("Seção Fase (mm²)", result.cable_section),
        ("Seção Neutro (mm²)", result.neutral_section),
        ("Seção Terra (mm²)", result.earth_section),
        ("Iz Corrigida (A)", round(result.iz_corrected, 2)),
        ("Disjuntor", f"{result.breaker_rating:g}A Curva {result.breaker_curve.value} {result.breaker_icn:g}kA"),
        ("Queda de Tensão (V)", round(result.voltage_drop, 2)),
        ("Queda de Tensão (%)", round(result.voltage_drop_percent, 2)),
        ("Limite de Queda (%)", result.voltage_drop_limit),
        ("Icc Presumida (A)", round(result.short_circuit_current, 0)),
        ("Eletroduto", result.conduit_size),
        ("Conforme (Queda/Capacidade)", _yes_no(result.is_voltage_conform)),
        ("Conforme (Icn)", _yes_no(result.is_icn_conform)),
        ("Conforme", _yes_no(result.is_conform)),
        ("Resultado", result.outcome.value),
        ("Total Estimado (R$)", round(result.bom_total, 2)),
    ]
    return pd.DataFrame(rows, columns=["Parâmetro", "Valor"])

def cable_table_frame() -> pd.DataFrame:
    return pd.DataFrame([
        {"Seção (mm²)": c.section, "B1 (A)": c.capacity.get("B1"), "B2 (A)": c.capacity.get("B2"),
         "C (A)": c.capacity.get("C"), "Resistência (Ω/km)": c.resistance}
        for c in CABLE_TABLE
    ])

def write_memorial(target: Union[str, BinaryIO], data: CalcInput, result: CalcResult) -> None:
    """Writes the calculation memorial workbook (.xlsx) to a path or binary buffer."""
    sheets = {
        "Dimensionamento": conductor_frame(data, result),
        "Materiais": bom_frame(result),
        "Diagnósticos": diagnostics_frame(result),
        "Ref Tabela Cabos": cable_table_frame(),
    }
    with pd.ExcelWriter(target, engine="openpyxl") as writer:
        for name, df in sheets.items():
            df.to_excel(writer, index=False, sheet_name=name)
            ws = writer.sheets[name]
            for cell in ws[1]:
                cell.font = HEADER_FONT
                cell.fill = HEADER_FILL
            for col in ws.columns:
                ws.column_dimensions[col[0].column_letter].width = 22

        ws = writer.sheets["Materiais"]
        ws.append([])
        ws.append(["Total Estimado", "", round(result.bom_total, 2)])
        ws.cell(row=ws.max_row, column=1).font = HEADER_FONT

def memorial_bytes(data: CalcInput, result: CalcResult) -> bytes:
    output = io.BytesIO()
    write_memorial(output, data, result)
    return output.getvalue()

def qdc_template() -> bytes:
    df = pd.DataFrame(
        [[1, 20.0, "Tomadas"], [2, 15.0, "Iluminação"], [3, 32.0, "Chuveiro"]],
        columns=CIRCUIT_COLUMNS,
    )
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Circuitos")
    return output.getvalue()

def read_circuits(source: Union[str, BinaryIO]) -> List[Circuit]:
    """Reads QDC circuits from a spreadsheet with Id / Corrente / Tipo columns."""
    df = pd.read_excel(source)
    if "Corrente" not in df.columns:
        raise InvalidInputError("Corrente", "coluna obrigatória ausente na planilha")

    circuits = []
    for idx, row in df.iterrows():
        current = row.get("Corrente")
        if pd.isna(current):
            continue
        circuit_id = row.get("Id")
        circuit_type = row.get("Tipo")
        circuits.append(Circuit(
            id=int(circuit_id) if not pd.isna(circuit_id) else int(idx) + 1,
            current=float(current),
            type=None if pd.isna(circuit_type) else str(circuit_type),
        ))
    return circuits
