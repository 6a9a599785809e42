"""
The shared sink for complaints.

The scanner, parser, and resolver all report through a `Report`,
which accumulates issues rather than stopping at the first one.
The run-time reports at most one error, because that error halts the program.
"""
import sys, random
from typing import Optional
from boozetools.support.failureprone import SourceText, illustration

from .ontology import Token, Phrase

class TooManyIssues(Exception):
	pass

def _outburst():
	particle = ["Oh, ", "Well, ", "Aw, ", "", ""]
	minced_oaths = [
		'Ack', 'ARGH', 'Blargh', 'Confound it', 'Crud', 'Curses', "Crikey",
		'Drat', 'Fiddlesticks', 'Good Grief', "Great Scott", 'Heavens',
		'Jeepers', 'Nuts', 'Rats', 'Woe is me',
	]
	resignations = [
		'I am undone.',
		'I cannot continue.',
		'I need to ask for help.',
	]
	return "%s%s! %s"%tuple(map(random.choice, (particle, minced_oaths, resignations)))

class Report:
	""" Collects issues from every pass, and one run-time error if it comes to that. """
	_issues : list["Pic"]
	
	def __init__(self, *, verbose:int=0, max_issues=None, source:Optional[str]=None, filename:Optional[str]=None):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._max_issues = max_issues
		self.runtime_issue = None
		self.set_source(source, filename)
	
	def set_source(self, source:Optional[str], filename:Optional[str]=None):
		self._source = None if source is None else SourceText(source, filename=filename)
	
	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)
	
	@property
	def had_runtime_error(self): return self.runtime_issue is not None
	
	@property
	def issues(self): return tuple(self._issues)
	
	def kinds(self) -> list[str]:
		""" Mostly for testing: which sorts of thing went wrong, in order. """
		return [i.kind for i in self._issues]
	
	def issue(self, it:"Pic"):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)
	
	def reset(self):
		self._issues.clear()
		self.runtime_issue = None
	
	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)
	
	def complain_to_console(self):
		""" Emit all the issues to the console. """
		issues = list(self._issues)
		if self.runtime_issue is not None: issues.append(self.runtime_issue)
		_bemoan(issues, self._source)
	
	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)
	
	# Methods the front-end is likely to call:
	
	def error_at_line(self, line:int, message:str, kind="SyntaxError"):
		self.issue(Pic(kind, "[line %d] Error: %s" % (line, message), []))
	
	def error_at(self, token:Token, message:str, kind="SyntaxError"):
		if token.kind == "EOF": where = " at end"
		else: where = " at '%s'" % token.text
		intro = "[line %d] Error%s: %s" % (token.line, where, message)
		self.issue(Pic(kind, intro, [Annotation(token)]))
	
	# Methods the resolver calls:
	
	def duplicate_declaration(self, name:Token):
		self.error_at(name, "Already a variable with this name in this scope.", "DuplicateDeclaration")
	
	def self_referencing_initializer(self, name:Token):
		self.error_at(name, "Can't read local variable in its own initializer.", "SelfReferencingInitializer")
	
	def return_outside_function(self, keyword:Token):
		self.error_at(keyword, "Can't return from top-level code.", "ReturnOutsideFunction")
	
	def this_outside_class(self, keyword:Token):
		self.error_at(keyword, "Can't use 'this' outside of a class.", "ThisOutsideClass")
	
	def super_outside_class(self, keyword:Token):
		self.error_at(keyword, "Can't use 'super' outside of a class.", "SuperOutsideClass")
	
	def super_without_superclass(self, keyword:Token):
		self.error_at(keyword, "Can't use 'super' in a class with no superclass.", "SuperWithoutSuperclass")
	
	def inherits_from_itself(self, name:Token):
		self.error_at(name, "A class can't inherit from itself.", "InheritsFromItself")
	
	# The run-time calls this at most once per run:
	
	def runtime_error(self, error):
		token = error.token
		intro = "%s\n[line %d]" % (error.message, token.line)
		self.runtime_issue = Pic(type(error).__name__, intro, [Annotation(token)])

class Annotation:
	line: int
	slice: slice
	caption: str
	def __init__(self, node, caption:str=""):
		token = node.token() if isinstance(node, Phrase) else node
		self.line = token.line
		self.slice = slice(token.offset, token.offset + len(token.text))
		self.caption = caption
	def illustrate(self, source:SourceText):
		row, col = source.find_row_col(self.slice.start)
		single_line = source.line_of_text(row)
		width = max(1, self.slice.stop - self.slice.start)
		return illustration(single_line, col, width, prefix='% 6d |' % self.line, caption=self.caption)

class Pic:
	def __init__(self, kind:str, intro:str, anns:list[Annotation]):
		self.kind = kind
		self.intro = intro
		self._anns = anns
	def as_text(self, source:Optional[SourceText]=None):
		lines = [self.intro]
		if source is not None:
			lines.extend(ann.illustrate(source) for ann in self._anns)
		return '\n'.join(lines)
	def __str__(self): return self.intro

def _bemoan(issues, source:Optional[SourceText]):
	""" Emit all the issues to the console. """
	for i in issues:
		print(i.as_text(source), file=sys.stderr)
	sys.stderr.flush()
