import unittest

from elevator_bank.car import CarState
from elevator_bank.clock import SimulationClock
from elevator_bank.config import BankConfig
from elevator_bank.dispatcher import Dispatcher
from elevator_bank.events import CAR_MOVING
from elevator_bank.simulation import Simulation


class SimulationIntegrationTest(unittest.TestCase):
    def build_simulation(self, **kwargs) -> Simulation:
        config = BankConfig(num_floors=10, car_count=5, initial_floors=[0, 1, 2, 2, 2])
        return Simulation.from_config(config, **kwargs)

    def test_random_calls_are_all_served(self):
        simulation = self.build_simulation(call_rate_per_floor=0.05, random_seed=11)
        simulation.run(60)
        simulation.run_until_idle()

        snapshot = simulation.metrics_snapshot()
        self.assertGreater(simulation.calls_registered, 0)
        self.assertEqual(snapshot.trips, simulation.calls_registered)
        self.assertEqual(snapshot.pending_calls, 0)
        self.assertEqual(sum(snapshot.trips_per_car.values()), snapshot.trips)
        self.assertTrue(all(car.state == CarState.IDLE for car in simulation.cars))
        self.assertTrue(all(not car.queue for car in simulation.cars))

    def test_same_seed_gives_same_run(self):
        first = self.build_simulation(call_rate_per_floor=0.1, random_seed=3)
        second = self.build_simulation(call_rate_per_floor=0.1, random_seed=3)
        first.run(20)
        second.run(20)
        self.assertEqual(first.snapshot(), second.snapshot())

    def test_outage_hands_work_to_remaining_cars(self):
        simulation = self.build_simulation()
        moves = []
        simulation.on_event(CAR_MOVING, moves.append)
        for floor in (9, 9, 9, 9, 9, 8):
            simulation.register_call(floor)
        simulation.mark_out_of_service(1)
        simulation.run_until_idle()

        self.assertEqual(simulation.cars[0].state, CarState.OUT_OF_SERVICE)
        served = [move.to_floor for move in moves if move.car_id != 1]
        self.assertEqual(sorted(served), [8, 9, 9, 9, 9, 9])
        self.assertEqual(simulation.metrics_snapshot().pending_calls, 0)

    def test_wraps_dispatcher_built_without_tracker(self):
        dispatcher = Dispatcher(BankConfig(car_count=2), SimulationClock())
        simulation = Simulation(dispatcher)
        simulation.register_call(3)
        simulation.run_until_idle()

        snapshot = simulation.metrics_snapshot()
        self.assertEqual(snapshot.trips, 1)
        self.assertEqual(snapshot.trips_per_car, {1: 1})
        self.assertIs(dispatcher.metrics, simulation.metrics)
        self.assertTrue(all(car.metrics is simulation.metrics for car in simulation.cars))

    def test_snapshot_reports_cars_and_backlog(self):
        simulation = self.build_simulation()
        simulation.register_call(4)
        snapshot = simulation.snapshot()
        self.assertEqual(snapshot["time"], 0.0)
        self.assertEqual(len(snapshot["cars"]), 5)
        self.assertEqual(snapshot["cars"][2]["state"], "moving")
        self.assertEqual(snapshot["cars"][2]["target"], 4)
        self.assertEqual(snapshot["pending_calls"], [])


if __name__ == "__main__":
    unittest.main()
