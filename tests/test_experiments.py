import unittest

from taxisim.simulation.config import SimulationConfig
from taxisim.simulation.experiments import (
    aggregate_summaries,
    run_replication,
    run_replications,
)
from taxisim.simulation.simulation import DispatchSimulation, SimulationSummary


class TestReplications(unittest.TestCase):
    """Batch runs over independent seeds"""

    def setUp(self):
        self.config = SimulationConfig(runtime=300, request_spawn_chance=0.4,
                                       max_active_requests=8, number_of_taxis=2)

    def test_single_replication_matches_direct_run(self):
        seeded = self.config.with_seed(11)
        direct = DispatchSimulation.from_config(seeded).run_to_completion()
        self.assertEqual(run_replication(seeded), direct)

    def test_sequential_replications_in_seed_order(self):
        summaries = run_replications(self.config, 3, base_seed=5, max_workers=1)

        self.assertEqual(len(summaries), 3)
        for offset, summary in enumerate(summaries):
            expected = run_replication(self.config.with_seed(5 + offset))
            self.assertEqual(summary, expected)
            self.assertEqual(summary.age, 301)

    def test_process_pool_matches_sequential(self):
        sequential = run_replications(self.config, 3, base_seed=20, max_workers=1)
        pooled = run_replications(self.config, 3, base_seed=20, max_workers=2)
        self.assertEqual(pooled, sequential)

    def test_zero_replications(self):
        self.assertEqual(run_replications(self.config, 0), [])

    def test_negative_replications_rejected(self):
        with self.assertRaises(ValueError):
            run_replications(self.config, -1)

    def test_non_positive_workers_rejected(self):
        with self.assertRaises(ValueError):
            run_replications(self.config, 2, max_workers=0)
        with self.assertRaises(ValueError):
            run_replications(self.config, 2, max_workers=-3)

    def test_replication_skips_status_lines(self):
        with self.assertLogs("taxisim", level="INFO") as logs:
            run_replication(self.config.with_seed(1))

        self.assertEqual(len(logs.output), 2)
        self.assertIn("Starting simulation", logs.output[0])
        self.assertIn("Finished simulation: Age: 301/300", logs.output[1])


class TestAggregation(unittest.TestCase):

    def make_summary(self, fulfilled, abandoned):
        return SimulationSummary(
            age=11, runtime=10, occupied_taxis=0, total_taxis=1,
            assigned_requests=0, waiting_requests=0,
            archived_requests=fulfilled + abandoned,
            fulfilled_requests=fulfilled, abandoned_requests=abandoned,
        )

    def test_aggregate(self):
        stats = aggregate_summaries([self.make_summary(4, 2), self.make_summary(6, 0)])

        self.assertEqual(stats['archived_requests'], {'mean': 6.0, 'min': 6.0, 'max': 6.0})
        self.assertEqual(stats['fulfilled_requests'], {'mean': 5.0, 'min': 4.0, 'max': 6.0})
        self.assertEqual(stats['abandoned_requests'], {'mean': 1.0, 'min': 0.0, 'max': 2.0})

    def test_aggregate_empty(self):
        self.assertEqual(aggregate_summaries([]), {})


if __name__ == '__main__':
    unittest.main()
