import unittest

from elevator_bank.clock import SimulationClock


class SimulationClockTest(unittest.TestCase):
    def test_events_fire_in_time_then_schedule_order(self):
        clock = SimulationClock()
        fired = []
        clock.schedule(2.0, fired.append, "late")
        clock.schedule(1.0, fired.append, "first")
        clock.schedule(1.0, fired.append, "second")
        clock.run_until_idle()
        self.assertEqual(fired, ["first", "second", "late"])
        self.assertAlmostEqual(clock.now, 2.0)

    def test_cancelled_event_never_fires(self):
        clock = SimulationClock()
        fired = []
        event = clock.schedule(1.0, fired.append, "stale")
        clock.schedule(1.5, fired.append, "fresh")
        clock.cancel(event)
        self.assertEqual(clock.pending, 1)
        clock.run_until_idle()
        self.assertEqual(fired, ["fresh"])

    def test_run_until_stops_at_requested_time(self):
        clock = SimulationClock()
        fired = []
        clock.schedule(1.0, fired.append, 1)
        clock.schedule(3.0, fired.append, 3)
        count = clock.run_until(2.0)
        self.assertEqual(count, 1)
        self.assertEqual(fired, [1])
        self.assertAlmostEqual(clock.now, 2.0)
        self.assertAlmostEqual(clock.next_time(), 3.0)

    def test_callbacks_can_schedule_more_events(self):
        clock = SimulationClock()
        fired = []

        def chain():
            fired.append(clock.now)
            if len(fired) < 3:
                clock.schedule(0.5, chain)

        clock.schedule(0.0, chain)
        clock.run_until_idle()
        self.assertEqual(len(fired), 3)
        self.assertAlmostEqual(fired[-1], 1.0)

    def test_rejects_negative_delay(self):
        clock = SimulationClock()
        with self.assertRaises(ValueError):
            clock.schedule(-0.1, lambda: None)

    def test_step_on_empty_clock(self):
        clock = SimulationClock()
        self.assertFalse(clock.step())
        self.assertIsNone(clock.next_time())


if __name__ == "__main__":
    unittest.main()
