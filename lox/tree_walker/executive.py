"""
This is the overall control for the run-time:
text goes in one end; output and complaints come out the other.
"""
from ..diagnostics import Report
from ..front_end import parse_text
from ..resolution import resolve
from .runtime import Interpreter

def run_text(text:str, interpreter:Interpreter, report:Report, check_only:bool=False) -> bool:
	"""
	Scan, parse, resolve, and (unless checking only) interpret some text.
	Nothing runs unless every earlier phase came through clean.
	Answer whether everything went smoothly.
	"""
	program = parse_text(text, report)
	if report.sick(): return False
	report.info("Parsed %d top-level statement(s)." % len(program))
	distances = resolve(program, report)
	if distances is None: return False
	report.info("Resolved %d local reference(s)." % len(distances))
	if check_only: return True
	return interpreter.interpret(program, distances)
