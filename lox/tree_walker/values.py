"""
This module defines the specialized value-types that the tree-walker operates in terms of.
Basic primitive values play themselves, but functions, classes, and instances need more help.
"""
from typing import Callable, Optional
from .. import syntax
from ..ontology import Token
from ..environment import Environment
from .types import ARGS, VALUE, LoxValue, LoxCallable, UndefinedProperty

INITIALIZER = "init"

class NativeFunction(LoxCallable):
	""" All arguments to native functions arrive fully evaluated, in order. """
	def __init__(self, name:str, arity:int, fn:Callable):
		self.name = name
		self._arity = arity
		self._fn = fn
	
	def __str__(self): return "<native fn>"
	
	def arity(self) -> int: return self._arity
	
	def call(self, interpreter, args: ARGS) -> VALUE:
		return self._fn(*args)

class UserFunction(LoxCallable):
	""" The run-time manifestation of a function declaration: a callable value tied to its natal environment. """
	def __init__(self, declaration:syntax.Function, closure:Environment, is_initializer:bool=False):
		self.declaration = declaration
		self.closure = closure
		self.is_initializer = is_initializer
	
	def __str__(self): return "<fn %s>" % self.declaration.name.text
	
	def arity(self) -> int: return len(self.declaration.params)
	
	def bind(self, instance:"LoxInstance") -> "UserFunction":
		env = Environment(self.closure)
		env.define("this", instance)
		return UserFunction(self.declaration, env, self.is_initializer)
	
	def call(self, interpreter, args: ARGS) -> VALUE:
		env = Environment(self.closure)
		for param, arg in zip(self.declaration.params, args):
			env.define(param.text, arg)
		signal = interpreter.execute_block(self.declaration.body, env)
		if self.is_initializer:
			# Whatever `return` said, an initializer produces its instance.
			return self.closure.get_at(0, "this")
		if signal is not None:
			return signal.value

class LoxClass(LoxCallable):
	def __init__(self, name:str, superclass:Optional["LoxClass"], methods:dict[str, UserFunction]):
		self.name = name
		self.superclass = superclass
		self._methods = methods
	
	def __str__(self): return self.name
	
	def find_method(self, name:str) -> Optional[UserFunction]:
		if name in self._methods: return self._methods[name]
		if self.superclass is not None: return self.superclass.find_method(name)
	
	def arity(self) -> int:
		initializer = self.find_method(INITIALIZER)
		return 0 if initializer is None else initializer.arity()
	
	def call(self, interpreter, args: ARGS) -> "LoxInstance":
		instance = LoxInstance(self)
		initializer = self.find_method(INITIALIZER)
		if initializer is not None:
			initializer.bind(instance).call(interpreter, args)
		return instance

class LoxInstance(LoxValue):
	def __init__(self, klass:LoxClass):
		self.klass = klass
		self.fields = {}
	
	def __str__(self): return "%s instance" % self.klass.name
	
	def get(self, name:Token) -> VALUE:
		# Fields shadow methods, even inherited ones.
		if name.text in self.fields: return self.fields[name.text]
		method = self.klass.find_method(name.text)
		if method is not None: return method.bind(self)
		raise UndefinedProperty(name)
	
	def set(self, name:Token, value:VALUE):
		self.fields[name.text] = value
