"""
This module aims to express an interface agreement
between the evaluator and various kinds of data,
including the ways evaluation can stop short.
"""

from abc import ABC, abstractmethod
from typing import Any, NamedTuple, Optional, Sequence, Union
from ..ontology import Token


class LoxValue(ABC):
	""" Root for classes that implement specialized run-time data structures """

class LoxCallable(LoxValue):
	@abstractmethod
	def arity(self) -> int: pass
	
	@abstractmethod
	def call(self, interpreter, args: "ARGS") -> "VALUE": pass

# Numbers are floats; nil is None.
NATIVE_DATA = Union[None, bool, float, str]
VALUE = Union[NATIVE_DATA, LoxValue]
ARGS = Sequence[VALUE]


class Returning(NamedTuple):
	"""
	What a statement hands back when a `return` is under way.
	Ordinary completion hands back None instead.
	Only a call boundary turns this back into a value.
	"""
	value: Any

SIGNAL = Optional[Returning]

###############################################################################

class LoxRuntimeError(Exception):
	""" Any failure that halts a running program. """
	def __init__(self, token:Token, message:str):
		super().__init__(token, message)
		self.token = token
		self.message = message
	def __str__(self): return self.message

class UndefinedVariable(LoxRuntimeError):
	def __init__(self, name:Token):
		super().__init__(name, "Undefined variable '%s'." % name.text)

class UndefinedProperty(LoxRuntimeError):
	def __init__(self, name:Token):
		super().__init__(name, "Undefined property '%s'." % name.text)

class LoxTypeError(LoxRuntimeError):
	pass

class ArityError(LoxRuntimeError):
	def __init__(self, paren:Token, expected:int, actual:int):
		super().__init__(paren, "Expected %d arguments but got %d." % (expected, actual))
		self.expected = expected
		self.actual = actual

class NotCallable(LoxRuntimeError):
	def __init__(self, paren:Token):
		super().__init__(paren, "Can only call functions and classes.")

class StackOverflow(LoxRuntimeError):
	def __init__(self, paren:Token):
		super().__init__(paren, "Stack overflow.")
