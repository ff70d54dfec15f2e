"""
Tests for the command-line driver, run against a tiny TSPLIB instance.
"""

import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path

from tsp_nnx.cli import build_parser, main, run
from tsp_test_utils import SQUARE_TOUR, SQUARE_TSP


class TestCli(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)
        self.problem = self.root / "square4.tsp"
        self.problem.write_text(SQUARE_TSP)
        (self.root / "square4.opt.tour").write_text(SQUARE_TOUR)
        self.checkpoint = self.root / "ckpt" / "state.json"

    def tearDown(self):
        self.tmp.cleanup()

    def _args(self, *extra):
        return build_parser().parse_args(
            [
                "run",
                str(self.problem),
                "--population-size",
                "10",
                "--checkpoint",
                str(self.checkpoint),
                *extra,
            ]
        )

    def _quiet(self, fn, *args, **kwargs):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            result = fn(*args, **kwargs)
        return result, out.getvalue()

    def test_auto_run(self):
        history, out = self._quiet(run, self._args("--auto", "--max-generation", "3"))
        self.assertEqual([s.generation for s in history], [1, 2, 3])
        self.assertIn("Generation 3/3 had average length", out)
        self.assertIn("gap to reference", out)
        state = json.loads(self.checkpoint.read_text())
        self.assertEqual(state["generation"], 4)
        self.assertEqual(len(state["population"]), 10)
        self.assertIn("reference length 40", out)
        best = history[-1]
        self.assertIn(best.best_length, (40, 48))
        self.assertAlmostEqual(best.gap, (best.best_length - 40) / 40)

    def test_quit_before_start(self):
        history, _ = self._quiet(run, self._args(), input_fn=lambda prompt: "q")
        self.assertEqual(history, [])
        self.assertFalse(self.checkpoint.exists())

    def test_quit_after_first_generation(self):
        answers = iter(["", "Q"])
        history, _ = self._quiet(run, self._args(), input_fn=lambda prompt: next(answers))
        self.assertEqual(len(history), 1)

    def test_resume_extends_run(self):
        self._quiet(run, self._args("--auto", "--max-generation", "2"))
        history, out = self._quiet(run, self._args("--auto", "--resume", "--max-generation", "4"))
        self.assertIn("resuming", out)
        self.assertEqual([s.generation for s in history], [3, 4])

    def test_inspect(self):
        self._quiet(run, self._args("--auto", "--max-generation", "2"))
        _, out = self._quiet(main, ["inspect", str(self.checkpoint), str(self.problem)])
        self.assertIn("generation=3", out)

    def test_inspect_without_checkpoint(self):
        _, out = self._quiet(main, ["inspect", str(self.root / "none.json"), str(self.problem)])
        self.assertIn("No checkpoint found", out)

    def test_invalid_config_is_rejected(self):
        with self.assertRaises(ValueError):
            self._quiet(run, self._args("--auto", "--mutation-rate", "2"))


if __name__ == "__main__":
    unittest.main()
