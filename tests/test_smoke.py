from pathlib import Path
import unittest

from common import run_lox

base_folder = Path(__file__).parent.parent
examples = base_folder/"examples"

def _good(which) -> list[str]:
	output, report = run_lox((examples / (which + ".lox")).read_text(encoding="utf-8"))
	report.assert_no_issues("Ostensibly-good example failed to resolve.")
	assert not report.had_runtime_error, report.runtime_issue
	return output

class ExampleSmokeTests(unittest.TestCase):
	""" Run all the examples; Test for no smoke. """
	
	def test_examples(self):
		for name, expected in [
			("counter", ["1", "2", "1"]),
			("fibonacci", ["0", "1", "1", "2", "3", "5", "8", "13", "21", "34"]),
			("pastry", [
				"A chocolate doughnut.",
				"Fry until golden brown. Pipe full of custard and coat with chocolate.",
			]),
		]:
			with self.subTest(name):
				self.assertEqual(expected, _good(name))


if __name__ == '__main__':
	unittest.main()
