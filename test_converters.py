import unittest

from core.converters import (
    InvalidInputError, calc_input_from_dict, convert_length_unit, convert_power_unit,
    motor_input_from_dict, parse_quantity, qdc_input_from_dict, solar_input_from_dict,
    spda_input_from_dict,
)
from core.models import BreakerCurve, ConductorMaterial, Insulation, LoadType, StartingMethod, SystemType
from standards import nbr5410

REQUEST = {
    "systemType": "monofasico", "voltage": 127, "power": 1200, "powerFactor": 1.0,
    "loadType": "iluminacao", "length": 20, "method": "B1", "temp": 30, "grouping": 1,
    "material": "cobre", "insulation": "PVC", "breakerCurve": "C", "breakerIcn": 3.0,
    "breakerRating": 16,
}

class TestUnitConversion(unittest.TestCase):
    def test_power_units(self):
        self.assertEqual(convert_power_unit(1200, "W", 127, 1, 1.0), (1200, None))
        self.assertEqual(convert_power_unit(5, "kW", 380, 3, 0.9), (5000.0, None))
        self.assertEqual(convert_power_unit(2, "cv", 380, 3, 0.9), (1471.0, None))
        self.assertEqual(convert_power_unit(2, "kVA", 220, 1, 0.8), (1600.0, None))
        watts, amps = convert_power_unit(10, "A", 220, 1, 0.9)
        self.assertAlmostEqual(watts, 1980)
        self.assertEqual(amps, 10)

    def test_imperial_units_are_rejected(self):
        with self.assertRaises(InvalidInputError):
            convert_power_unit(5, "HP", 380, 3, 0.9)
        with self.assertRaises(InvalidInputError):
            convert_length_unit(100, "ft")

    def test_length_units(self):
        self.assertEqual(convert_length_unit(25, "m"), 25)
        self.assertEqual(convert_length_unit(0.5, "km"), 500)
        self.assertEqual(convert_length_unit(250, "cm"), 2.5)

    def test_parse_quantity(self):
        self.assertEqual(parse_quantity("10 kW", "W"), (10.0, "kW"))
        self.assertEqual(parse_quantity("12,5m", "m"), (12.5, "m"))
        self.assertEqual(parse_quantity("300", "W"), (300.0, "W"))
        with self.assertRaises(InvalidInputError):
            parse_quantity("dez", "W")

class TestConductorRequest(unittest.TestCase):
    def test_decodes_request(self):
        data = calc_input_from_dict(REQUEST)
        self.assertEqual(data.system_type, SystemType.MONOFASICO)
        self.assertEqual(data.load_type, LoadType.ILUMINACAO)
        self.assertEqual(data.material, ConductorMaterial.COBRE)
        self.assertEqual(data.insulation, Insulation.PVC)
        self.assertEqual(data.breaker_curve, BreakerCurve.C)
        self.assertEqual(data.grouping, 1)
        self.assertEqual(nbr5410.size(data).cable_section, 1.5)

    def test_defaults(self):
        minimal = {k: REQUEST[k] for k in ("systemType", "voltage", "power", "loadType", "length", "breakerRating")}
        data = calc_input_from_dict(minimal)
        self.assertEqual(data.method, "B1")
        self.assertEqual(data.breaker_curve, BreakerCurve.C)
        self.assertEqual(data.power_factor, 1.0)

    def test_method_is_validated(self):
        self.assertEqual(calc_input_from_dict(dict(REQUEST, method="a1")).method, "A1")
        with self.assertRaises(InvalidInputError) as ctx:
            calc_input_from_dict(dict(REQUEST, method="D"))
        self.assertEqual(ctx.exception.field, "method")

    def test_rejects_bad_values(self):
        bad = [
            ("systemType", "hexafasico"),
            ("voltage", 0),
            ("powerFactor", 1.2),
            ("length", -5),
            ("breakerRating", "dezesseis"),
            ("breakerCurve", "K"),
        ]
        for field, value in bad:
            with self.assertRaises(InvalidInputError) as ctx:
                calc_input_from_dict(dict(REQUEST, **{field: value}))
            self.assertEqual(ctx.exception.field, field)

    def test_grouping_must_be_whole(self):
        self.assertEqual(calc_input_from_dict(dict(REQUEST, grouping="3")).grouping, 3)
        for value in (2.9, "1.5", 0):
            with self.assertRaises(InvalidInputError) as ctx:
                calc_input_from_dict(dict(REQUEST, grouping=value))
            self.assertEqual(ctx.exception.field, "grouping")

    def test_missing_required_field(self):
        request = dict(REQUEST)
        del request["voltage"]
        with self.assertRaises(InvalidInputError):
            calc_input_from_dict(request)

    def test_is_a_value_error(self):
        with self.assertRaises(ValueError):
            calc_input_from_dict(dict(REQUEST, loadType="forno"))

class TestSiblingRequests(unittest.TestCase):
    def test_motor(self):
        data = motor_input_from_dict({"powerCV": 5, "voltage": 380, "efficiency": 85,
                                      "powerFactor": 0.8, "startingMethod": "estrela-triangulo"})
        self.assertEqual(data.starting_method, StartingMethod.ESTRELA_TRIANGULO)
        with self.assertRaises(InvalidInputError):
            motor_input_from_dict({"powerCV": 5, "voltage": 380, "efficiency": 120, "powerFactor": 0.8})

    def test_qdc(self):
        data = qdc_input_from_dict({"circuits": [{"id": 7, "current": 20, "type": "TUG"}, {"current": "15"}]})
        self.assertEqual([c.current for c in data.circuits], [20, 15])
        self.assertEqual([c.id for c in data.circuits], [7, 2])
        self.assertEqual(qdc_input_from_dict({}).circuits, ())

    def test_qdc_rejects_malformed_circuits(self):
        with self.assertRaises(InvalidInputError) as ctx:
            qdc_input_from_dict({"circuits": [{"current": 10}, 15]})
        self.assertEqual(ctx.exception.field, "circuits[1]")
        with self.assertRaises(InvalidInputError) as ctx:
            qdc_input_from_dict({"circuits": [{"id": "Q1", "current": 10}]})
        self.assertEqual(ctx.exception.field, "id")

    def test_spda(self):
        data = spda_input_from_dict({"height": 12, "width": 10, "length": 30, "riskLevel": "2"})
        self.assertEqual(data.risk_level, 2)
        for level in (0, 5, 2.5):
            with self.assertRaises(InvalidInputError):
                spda_input_from_dict({"height": 12, "width": 10, "length": 30, "riskLevel": level})

    def test_solar(self):
        data = solar_input_from_dict({"monthlyConsumption": 300, "solarIrradiation": 5, "panelPower": 550})
        self.assertEqual(data.panel_power, 550)
        with self.assertRaises(InvalidInputError):
            solar_input_from_dict({"monthlyConsumption": 300, "solarIrradiation": 0, "panelPower": 550})

if __name__ == '__main__':
    unittest.main()
