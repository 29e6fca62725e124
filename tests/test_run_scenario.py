import importlib.util
import unittest
from pathlib import Path

from elevator_bank.errors import InvalidFloor

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "run_scenario.py"


def load_runner():
    spec = importlib.util.spec_from_file_location("run_scenario", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class RunScenarioTest(unittest.TestCase):
    def setUp(self):
        self.runner = load_runner()
        self.config = {
            "building": {"num_floors": 10, "car_count": 2},
            "calls": [{"time": 0.0, "floor": 5}, {"time": 1.0, "floor": 2}],
            "outages": [{"time": 2.0, "car_id": 2}],
            "duration": 10,
        }

    def test_scripted_run_serves_every_call(self):
        simulation = self.runner.build_simulation(self.config)
        snapshots = self.runner.run_simulation(simulation, self.config)
        self.assertEqual(len(snapshots), 10)
        self.assertEqual(simulation.metrics_snapshot().trips, 2)
        self.assertEqual(simulation.cars[1].state.value, "out_of_service")

    def test_unknown_outage_car_rejected_before_run(self):
        self.config["outages"] = [{"time": 2.0, "car_id": 7}]
        simulation = self.runner.build_simulation(self.config)
        with self.assertRaises(ValueError):
            self.runner.run_simulation(simulation, self.config)
        self.assertEqual(simulation.clock.pending, 0)
        self.assertEqual(simulation.current_time, 0.0)

    def test_invalid_call_floor_rejected_before_run(self):
        self.config["calls"].append({"time": 3.0, "floor": 12})
        simulation = self.runner.build_simulation(self.config)
        with self.assertRaises(InvalidFloor):
            self.runner.run_simulation(simulation, self.config)
        self.assertEqual(simulation.clock.pending, 0)


if __name__ == "__main__":
    unittest.main()
