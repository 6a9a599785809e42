"""
These most-fundamental classes in the syntax class hierarchy
are separate from the rest to avoid various circular-import
scenarios. Tokens are the atoms of location for diagnostics:
anything that wants to complain about a phrase asks it for a token.
"""
import sys
from typing import Any

class Token:
	""" Representing the occurrence of a lexeme anywhere. """
	def __init__(self, kind:str, text:str, literal:Any, line:int, offset:int=0):
		assert isinstance(text, str)
		self.kind = sys.intern(kind)
		self.text = text
		self.literal = literal
		self.line = line
		self.offset = offset
	def __repr__(self): return "<%s %r @%d>" % (self.kind, self.text, self.line)

class Phrase:
	def token(self) -> Token:
		""" Return the token which best locates this phrase """
		raise NotImplementedError(type(self))

class Expr(Phrase):
	"""
	Expressions are keys in the resolver's distance map.
	Do not give them structural equality: two `a` references
	in different places must stay different keys.
	"""

class Stmt(Phrase): pass
