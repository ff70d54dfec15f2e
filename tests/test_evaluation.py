import unittest

from tsp_nnx.evaluation import GenerationStats, best_result, snapshot, summarize_history
from tsp_nnx.evolutionary import EvolutionConfig, new_solver
from tsp_test_utils import random_matrix


class TestEvaluation(unittest.TestCase):

    def setUp(self):
        self.solver = new_solver(random_matrix(10, seed=1), config=EvolutionConfig(population_size=12))
        self.solver.initialize()

    def test_best_result(self):
        result = best_result(self.solver, optimum=100)
        self.assertIs(result.tour, self.solver.fittest_individual())
        self.assertEqual(result.solver_name, "GeneticSolver")
        self.assertAlmostEqual(result.gap, (result.length - 100) / 100)

    def test_snapshot(self):
        stats = snapshot(self.solver)
        self.assertEqual(stats.generation, 1)
        self.assertEqual(stats.best_length, self.solver.fittest_individual().length)
        self.assertEqual(stats.avg_length, self.solver.avg_fitness())
        self.assertEqual(stats.gap, float("inf"))

    def test_summarize_history(self):
        history = [GenerationStats(1, 200, 300, 1.0), GenerationStats(2, 150, 250, 0.5)]
        summary = summarize_history(history)
        self.assertEqual(summary["generations"], 2)
        self.assertEqual(summary["first_best"], 200)
        self.assertEqual(summary["last_best"], 150)
        self.assertAlmostEqual(summary["improvement"], 0.25)
        self.assertEqual(summarize_history([])["generations"], 0)


if __name__ == "__main__":
    unittest.main()
