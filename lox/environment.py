"""
The canonical list-structured search.

Each environment is one lexical scope: a dictionary of bindings
and a static link to the enclosing scope. Closures keep their
natal environment alive, so these form a graph, not a stack.
"""
from typing import Any, Optional
from .ontology import Token
from .tree_walker.types import UndefinedVariable

class Environment:
	_bindings : dict[str, Any]
	enclosing : Optional["Environment"]
	
	def __init__(self, enclosing:Optional["Environment"]=None):
		self._bindings = {}
		self.enclosing = enclosing
	
	def __repr__(self):
		depth, env = 0, self.enclosing
		while env is not None: depth, env = depth+1, env.enclosing
		return "<Environment depth=%d %s>" % (depth, sorted(self._bindings))
	
	def define(self, name:str, value:Any):
		""" Re-definition simply overwrites. The resolver polices block scopes. """
		self._bindings[name] = value
	
	def get(self, name:Token) -> Any:
		env = self
		while env is not None:
			if name.text in env._bindings: return env._bindings[name.text]
			env = env.enclosing
		raise UndefinedVariable(name)
	
	def assign(self, name:Token, value:Any):
		env = self
		while env is not None:
			if name.text in env._bindings:
				env._bindings[name.text] = value
				return
			env = env.enclosing
		raise UndefinedVariable(name)
	
	def ancestor(self, distance:int) -> "Environment":
		env = self
		for _ in range(distance): env = env.enclosing
		return env
	
	# These trust the resolver completely. A miss here is a bug, not a user error.
	
	def get_at(self, distance:int, name:str) -> Any:
		return self.ancestor(distance)._bindings[name]
	
	def assign_at(self, distance:int, name:Token, value:Any):
		self.ancestor(distance)._bindings[name.text] = value
