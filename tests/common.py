"""
Bits and pieces every test module wants.
"""
from unittest import mock

from lox.diagnostics import Report
from lox.tree_walker.runtime import Interpreter
from lox.tree_walker.executive import run_text

class Silence(Report):
	def __init__(self):
		super().__init__(verbose=False, max_issues=30)
		self.complain_to_console = mock.Mock()
	pass

def run_lox(text:str):
	""" Run some text; return the printed lines and the report. """
	report = Silence()
	output = []
	run_text(text, Interpreter(report, output.append), report)
	return output, report
