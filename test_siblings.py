import math
import unittest

from core.components import Circuit
from core.models import MotorCalcInput, QDCCalcInput, SolarInput, SPDAInput, StartingMethod
from standards import motors, nbr5419, qdc, solar
from standards.motors import MotorCalculator
from standards.qdc import QDCCalculator

class TestMotorSizing(unittest.TestCase):
    FIVE_CV = MotorCalcInput(power_cv=5, voltage=380, efficiency=85, power_factor=0.8,
                             starting_method=StartingMethod.DIRETA)

    def test_direct_start(self):
        res = motors.size(self.FIVE_CV)
        # In = 5 * 735.5 / (1.732 * 380 * 0.85 * 0.8) = 8.22 A
        self.assertAlmostEqual(res.nominal_current, 8.2167, places=3)
        self.assertAlmostEqual(res.starting_current, 8.2167 * 7, places=2)
        # 1.25 * 8.22 = 10.27 A -> 13 A
        self.assertEqual(res.breaker, 13)
        self.assertAlmostEqual(res.relay, 8.2167 * 1.1, places=3)
        self.assertEqual(res.contactor, "CWM9")

    def test_starting_methods(self):
        nominal = motors.size(self.FIVE_CV).nominal_current
        expected = {
            StartingMethod.DIRETA: 7.0,
            StartingMethod.ESTRELA_TRIANGULO: 2.3,
            StartingMethod.SOFT_STARTER: 3.0,
        }
        for method, multiplier in expected.items():
            data = MotorCalcInput(5, 380, 85, 0.8, method)
            self.assertAlmostEqual(motors.size(data).starting_current, nominal * multiplier)

    def test_large_motors(self):
        # 50 CV: In = 82.2 A, 1.25 * In = 102.7 A -> 125 A
        res = motors.size(MotorCalcInput(50, 380, 85, 0.8))
        self.assertEqual(res.breaker, 125)
        self.assertEqual(res.contactor, "CWM25")
        # 100 CV runs past the breaker list and falls back to 125 A
        res = motors.size(MotorCalcInput(100, 380, 85, 0.8))
        self.assertEqual(res.breaker, 125)

    def test_contactor_bands(self):
        calc = MotorCalculator()
        expected = [(8.99, "CWM9"), (9, "CWM12"), (11.9, "CWM12"), (12, "CWM18"), (17.99, "CWM18"), (18, "CWM25")]
        for current, contactor in expected:
            self.assertEqual(calc.select_contactor(current), contactor)

    def test_zero_voltage(self):
        res = motors.size(MotorCalcInput(5, 0, 85, 0.8))
        self.assertTrue(math.isinf(res.nominal_current))
        self.assertEqual(res.breaker, 125)

class TestQDCSizing(unittest.TestCase):
    def test_three_circuits(self):
        circuits = [Circuit(1, 20, "Tomadas"), Circuit(2, 15, "Iluminação"), Circuit(3, 32, "Chuveiro")]
        res = qdc.size(QDCCalcInput(circuits=tuple(circuits)))

        self.assertEqual(res.total_current, 67)
        # 0.8 * 67 = 53.6 A -> 63 A
        self.assertEqual(res.main_breaker, 63)
        self.assertEqual(res.dr_rating, 63)
        self.assertEqual(res.dps_rating, "20kA / 275V")
        self.assertAlmostEqual(res.busbar_current, 78.75)
        self.assertEqual([(p.phase, p.current) for p in res.phase_balance], [("R", 32), ("S", 20), ("T", 15)])
        # mean 22.33 A, worst phase 9.67 A off
        self.assertAlmostEqual(res.imbalance_percent, 43.28, places=1)

    def test_caller_list_is_not_reordered(self):
        circuits = [Circuit(1, 5), Circuit(2, 40), Circuit(3, 12), Circuit(4, 25)]
        snapshot = list(circuits)
        QDCCalculator().calculate(QDCCalcInput(circuits=circuits))
        self.assertEqual(circuits, snapshot)

    def test_largest_first_round_robin(self):
        currents = [5, 40, 12, 25, 8, 30, 16]
        circuits = tuple(Circuit(i + 1, c) for i, c in enumerate(currents))
        res = qdc.size(QDCCalcInput(circuits=circuits))
        # 40, 30, 25 | 16, 12, 8 | 5
        self.assertEqual([p.current for p in res.phase_balance], [61, 42, 33])
        self.assertEqual(res.total_current, 136)
        self.assertEqual(res.main_breaker, 125)

    def test_balanced_panel(self):
        circuits = tuple(Circuit(i, 10) for i in range(6))
        res = qdc.size(QDCCalcInput(circuits=circuits))
        self.assertEqual(res.imbalance_percent, 0)

    def test_empty_panel(self):
        res = qdc.size(QDCCalcInput())
        self.assertEqual(res.total_current, 0)
        self.assertEqual(res.main_breaker, 6)
        self.assertEqual(res.imbalance_percent, 0)
        self.assertEqual(len(res.phase_balance), 3)

    def test_demand_beyond_breaker_list(self):
        res = qdc.size(QDCCalcInput(circuits=(Circuit(1, 100), Circuit(2, 100))))
        self.assertEqual(res.main_breaker, 125)

class TestSPDASizing(unittest.TestCase):
    def test_levels(self):
        expected = {1: (10, "5x5m"), 2: (15, "10x10m"), 3: (20, "15x15m"), 4: (25, "20x20m")}
        for level, (spacing, mesh) in expected.items():
            res = nbr5419.size(SPDAInput(height=10, width=20, length=30, risk_level=level))
            self.assertEqual(res.down_conductor_spacing, spacing)
            self.assertEqual(res.mesh_size, mesh)
            self.assertEqual(res.protection_radius, 15)
            self.assertEqual(res.grounding_ring_depth, 0.5)

    def test_out_of_range_level_is_clamped(self):
        self.assertEqual(nbr5419.size(SPDAInput(12, 10, 10, 0)).mesh_size, "5x5m")
        self.assertEqual(nbr5419.size(SPDAInput(12, 10, 10, 7)).mesh_size, "20x20m")

class TestSolarSizing(unittest.TestCase):
    def test_residential_system(self):
        res = solar.size(SolarInput(monthly_consumption=300, solar_irradiation=5, panel_power=550))
        # 10 kWh/day / 5 h / 0.8 = 2.5 kWp -> 2500 / 550 = 4.5 -> 5 panels
        self.assertAlmostEqual(res.system_power, 2.5)
        self.assertEqual(res.estimated_panels, 5)
        self.assertAlmostEqual(res.monthly_generation, 300)
        self.assertEqual(res.estimated_area, 10)

    def test_generation_matches_consumption(self):
        res = solar.size(SolarInput(500, 4.5, 450))
        self.assertEqual(res.estimated_panels, 11)
        self.assertAlmostEqual(res.monthly_generation, 500)

    def test_no_irradiation(self):
        res = solar.size(SolarInput(300, 0, 550))
        self.assertEqual(res.estimated_panels, 0)
        self.assertEqual(res.system_power, 0)

if __name__ == '__main__':
    unittest.main()
