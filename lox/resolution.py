"""
All the static name-resolution stuff goes here.

By the time this pass is finished, every local variable reference
knows how many scopes out its definition lives. References it cannot
find are left alone; those are globals, looked up by name at run-time.
"""
from typing import Iterable, Optional, TypeAlias
from boozetools.support.foundation import Visitor
from . import syntax
from .ontology import Token
from .diagnostics import Report

DistanceMap:TypeAlias = dict[syntax.Expr, int]

# What sort of function body are we in?
NO_FUNCTION = "none"
FUNCTION = "function"
METHOD = "method"
INITIALIZER = "initializer"

# What sort of class body are we in?
NO_CLASS = "none"
CLASS = "class"
SUBCLASS = "subclass"

class TopDown(Visitor):
	"""
	Convenience base-class to handle the dreary bits of a
	perfectly ordinary top-down walk through a syntax tree.
	"""
	
	def tour(self, items:Iterable):
		for i in items:
			self.visit(i)
	
	def visit_Literal(self, expr:syntax.Literal): pass
	
	def visit_Binary(self, expr:syntax.Binary):
		self.visit(expr.left)
		self.visit(expr.right)
	
	def visit_Logical(self, expr:syntax.Logical):
		self.visit(expr.left)
		self.visit(expr.right)
	
	def visit_Unary(self, expr:syntax.Unary):
		self.visit(expr.right)
	
	def visit_Grouping(self, expr:syntax.Grouping):
		self.visit(expr.inner)
	
	def visit_Call(self, expr:syntax.Call):
		self.visit(expr.callee)
		self.tour(expr.args)
	
	def visit_Get(self, expr:syntax.Get):
		# Property names are dynamic; only the object gets resolved.
		self.visit(expr.object)
	
	def visit_Set(self, expr:syntax.Set):
		self.visit(expr.value)
		self.visit(expr.object)
	
	def visit_Expression(self, stmt:syntax.Expression):
		self.visit(stmt.expr)
	
	def visit_Print(self, stmt:syntax.Print):
		self.visit(stmt.expr)
	
	def visit_If(self, stmt:syntax.If):
		self.visit(stmt.condition)
		self.visit(stmt.then_branch)
		if stmt.else_branch is not None: self.visit(stmt.else_branch)
	
	def visit_While(self, stmt:syntax.While):
		self.visit(stmt.condition)
		self.visit(stmt.body)

class Resolver(TopDown):
	"""
	This single top-down tree-walk does a few things.
	
	* Connect each local reference to the scope that defines it, by distance.
	* Complain about duplicate locals and locals read in their own initializers.
	* Complain about `return`, `this`, and `super` in places they make no sense.
	
	It never stops at the first complaint. The report collects them all.
	"""
	distances: DistanceMap
	report: Report
	
	_scopes: list[dict[str, bool]]
	_current_function: str
	_current_class: str
	
	def __init__(self, report:Report):
		self.report = report
		self.distances = {}
		self._scopes = []
		self._current_function = NO_FUNCTION
		self._current_class = NO_CLASS
	
	def resolve_program(self, program:Iterable[syntax.Stmt]) -> DistanceMap:
		self.tour(program)
		return self.distances
	
	# Scope plumbing
	
	def _begin_scope(self, **bindings:bool):
		self._scopes.append(dict(bindings))
	
	def _end_scope(self):
		self._scopes.pop()
	
	def _declare(self, name:Token):
		# The global scope is not tracked, so re-declaring a global is fine.
		if not self._scopes: return
		scope = self._scopes[-1]
		if name.text in scope: self.report.duplicate_declaration(name)
		scope[name.text] = False
	
	def _define(self, name:Token):
		if self._scopes: self._scopes[-1][name.text] = True
	
	def _resolve_local(self, expr:syntax.Expr, name:Token, skip:int=0) -> bool:
		for distance, scope in enumerate(reversed(self._scopes)):
			if distance >= skip and name.text in scope:
				self.distances[expr] = distance
				return True
		return False
	
	def _resolve_function(self, fn:syntax.Function, kind:str):
		enclosing_function = self._current_function
		self._current_function = kind
		self._begin_scope()
		for param in fn.params:
			self._declare(param)
			self._define(param)
		# The body shares the parameters' scope, just as it will at run-time.
		self.tour(fn.body)
		self._end_scope()
		self._current_function = enclosing_function
	
	# Statements
	
	def visit_Block(self, stmt:syntax.Block):
		self._begin_scope()
		self.tour(stmt.statements)
		self._end_scope()
	
	def visit_Var(self, stmt:syntax.Var):
		self._declare(stmt.name)
		if stmt.initializer is not None: self.visit(stmt.initializer)
		self._define(stmt.name)
	
	def visit_Function(self, stmt:syntax.Function):
		# Defined before the body is resolved, so the function can call itself.
		self._declare(stmt.name)
		self._define(stmt.name)
		self._resolve_function(stmt, FUNCTION)
	
	def visit_Return(self, stmt:syntax.Return):
		if self._current_function == NO_FUNCTION:
			self.report.return_outside_function(stmt.keyword)
		if stmt.value is not None: self.visit(stmt.value)
	
	def visit_Class(self, stmt:syntax.Class):
		enclosing_class = self._current_class
		self._current_class = CLASS
		self._declare(stmt.name)
		self._define(stmt.name)
		
		superclass = stmt.superclass
		if superclass is not None:
			if superclass.name.text == stmt.name.text:
				self.report.inherits_from_itself(superclass.name)
			self._current_class = SUBCLASS
			self.visit(superclass)
			self._begin_scope(super=True)
		
		self._begin_scope(this=True)
		for method in stmt.methods:
			kind = INITIALIZER if method.name.text == "init" else METHOD
			self._resolve_function(method, kind)
		self._end_scope()
		
		if superclass is not None: self._end_scope()
		self._current_class = enclosing_class
	
	# Expressions
	
	def visit_Variable(self, expr:syntax.Variable):
		if self._scopes and self._scopes[-1].get(expr.name.text) is False:
			# An initializer may read the local it shadows, but not the one it defines.
			if not self._resolve_local(expr, expr.name, skip=1):
				self.report.self_referencing_initializer(expr.name)
		else:
			self._resolve_local(expr, expr.name)
	
	def visit_Assign(self, expr:syntax.Assign):
		self.visit(expr.value)
		self._resolve_local(expr, expr.name)
	
	def visit_This(self, expr:syntax.This):
		if self._current_class == NO_CLASS:
			self.report.this_outside_class(expr.keyword)
		else:
			self._resolve_local(expr, expr.keyword)
	
	def visit_Super(self, expr:syntax.Super):
		if self._current_class == NO_CLASS:
			self.report.super_outside_class(expr.keyword)
		elif self._current_class != SUBCLASS:
			self.report.super_without_superclass(expr.keyword)
		else:
			self._resolve_local(expr, expr.keyword)

def resolve(program:Iterable[syntax.Stmt], report:Report) -> Optional[DistanceMap]:
	"""
	Resolve the program. Return the distance map, or None if the report got sick.
	Only a clean resolution is fit to run.
	"""
	distances = Resolver(report).resolve_program(program)
	if report.ok(): return distances
