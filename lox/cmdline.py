"""
This is an interpreter for the Lox programming language.

For example:

    lox program.lox

will run program.lox if possible, or else try to explain why not.

    lox

with no script starts an interactive prompt.
"""
import sys, argparse
from pathlib import Path

# Exit codes, in the style of sysexits.h
EX_USAGE = 64
EX_DATAERR = 65
EX_SOFTWARE = 70

parser = argparse.ArgumentParser(
	prog="lox",
	description=__doc__.strip().splitlines()[0],
)
parser.add_argument("script", nargs="?", help="a Lox source file; omit for an interactive prompt.")
parser.add_argument('-c', "--check", action="store_true", help="Check the program but do not actually execute it.")
parser.add_argument('-v', "--verbose", action="count", help="Chatter on stderr about each phase.")

def run_file(path:Path, verbose=0, check=False) -> int:
	from .diagnostics import Report, TooManyIssues
	from .tree_walker.runtime import Interpreter
	from .tree_walker.executive import run_text
	try: text = path.read_text(encoding="utf-8")
	except OSError as ex:
		print("Could not read %s: %s" % (path, ex), file=sys.stderr)
		return EX_USAGE
	report = Report(verbose=verbose, max_issues=50, source=text, filename=str(path))
	try:
		run_text(text, Interpreter(report), report, check_only=check)
	except TooManyIssues:
		report.complain_to_console()
		print("Giving up after a few issues. One crisis at a time, eh?", file=sys.stderr)
		return EX_DATAERR
	if report.sick():
		report.complain_to_console()
		return EX_DATAERR
	if report.had_runtime_error:
		report.complain_to_console()
		return EX_SOFTWARE
	if check:
		print("Looks plausible to me.", file=sys.stderr)
	return 0

def run_prompt(verbose=0, stdin=sys.stdin) -> int:
	""" Each line runs against the same globals. Mistakes are forgiven line by line. """
	from .diagnostics import Report
	from .tree_walker.runtime import Interpreter
	from .tree_walker.executive import run_text
	report = Report(verbose=verbose)
	interpreter = Interpreter(report)
	while True:
		print("> ", end="", flush=True)
		line = stdin.readline()
		if not line: break
		report.reset()
		report.set_source(line)
		run_text(line, interpreter, report)
		report.complain_to_console()
	print()
	return 0

def run(args) -> int:
	if args.script is None:
		return run_prompt(verbose=args.verbose)
	return run_file(Path.cwd() / args.script, verbose=args.verbose, check=args.check)

def main():
	exit(run(parser.parse_args()))
