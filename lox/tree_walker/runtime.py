"""
The evaluator proper.

Dispatch is by node type through two tables, one for expressions and one
for statements, filled in from the annotations on the `_eval_*` and `_exec_*`
methods below. Every node type must have an entry; this is checked at import.

The active environment travels as an argument, so leaving a block or a call
restores the outer environment on every path out, including errors.
"""
import math
import operator
import sys
from typing import Callable, Iterable, Sequence
from .. import syntax
from ..ontology import Token
from ..diagnostics import Report
from ..environment import Environment
from ..primitive import root_environment
from ..resolution import DistanceMap
from .types import (
	VALUE, SIGNAL, Returning, LoxCallable,
	LoxRuntimeError, LoxTypeError, ArityError, NotCallable, UndefinedProperty, StackOverflow,
)
from .values import UserFunction, LoxClass, LoxInstance, INITIALIZER

def _divide(a:float, b:float) -> float:
	# IEEE-754 has an answer for this, even if Python would rather complain.
	try: return a / b
	except ZeroDivisionError:
		if a == 0 or math.isnan(a): return math.nan
		return math.copysign(math.inf, a) * math.copysign(1.0, b)

PRIMITIVE_BINARY = {
	"MINUS" : operator.sub,
	"STAR" : operator.mul,
	"SLASH" : _divide,
	"GREATER" : operator.gt,
	"GREATER_EQUAL" : operator.ge,
	"LESS" : operator.lt,
	"LESS_EQUAL" : operator.le,
}
SHORTCUT = {
	"OR": True,
	"AND": False,
}

# Python frames, not Lox calls. Each Lox call costs about ten.
STACK_DEPTH = 25_000

def is_number(value:VALUE) -> bool:
	return isinstance(value, float)

def is_truthy(value:VALUE) -> bool:
	return not (value is None or value is False)

def is_equal(a:VALUE, b:VALUE) -> bool:
	""" Never throws. Values of different kinds are simply unequal, so true != 1. """
	if type(a) is not type(b): return False
	return a == b

def stringify(value:VALUE) -> str:
	if value is None: return "nil"
	if value is True: return "true"
	if value is False: return "false"
	if is_number(value):
		text = str(value)
		return text[:-2] if text.endswith(".0") else text
	return str(value)

def _check_number_operand(op:Token, operand:VALUE):
	if not is_number(operand):
		raise LoxTypeError(op, "Operand must be a number.")

def _check_number_operands(op:Token, left:VALUE, right:VALUE):
	if not (is_number(left) and is_number(right)):
		raise LoxTypeError(op, "Operands must be numbers.")

###############################################################################

EVALUATE = {}
EXECUTE = {}

class Interpreter:
	"""
	Runs resolved programs against a persistent global environment.
	A prompt session can feed it one line after another.
	"""
	globals: Environment
	
	def __init__(self, report:Report, emit:Callable[[str], None]=print):
		self.report = report
		if sys.getrecursionlimit() < STACK_DEPTH: sys.setrecursionlimit(STACK_DEPTH)
		self.globals = root_environment()
		self._locals = {}
		self._emit = emit
	
	def interpret(self, program:Iterable[syntax.Stmt], distances:DistanceMap) -> bool:
		"""
		Run the statements in order. The first run-time error halts the whole run
		and goes to the report. Answer whether the run went clean.
		"""
		# Accumulate: functions from earlier REPL lines still need their own distances.
		self._locals.update(distances)
		try:
			for stmt in program: self.execute(stmt, self.globals)
		except LoxRuntimeError as ex:
			self.report.runtime_error(ex)
			return False
		return True
	
	def evaluate(self, expr:syntax.Expr, env:Environment) -> VALUE:
		return EVALUATE[type(expr)](self, expr, env)
	
	def execute(self, stmt:syntax.Stmt, env:Environment) -> SIGNAL:
		return EXECUTE[type(stmt)](self, stmt, env)
	
	def execute_block(self, statements:Sequence[syntax.Stmt], env:Environment) -> SIGNAL:
		for stmt in statements:
			signal = self.execute(stmt, env)
			if signal is not None: return signal
	
	def _look_up(self, name:Token, expr:syntax.Expr, env:Environment) -> VALUE:
		distance = self._locals.get(expr)
		if distance is None: return self.globals.get(name)
		return env.get_at(distance, name.text)
	
	###########################################################################
	
	def _eval_literal(self, expr:syntax.Literal, env:Environment):
		return expr.value
	
	def _eval_grouping(self, expr:syntax.Grouping, env:Environment):
		return self.evaluate(expr.inner, env)
	
	def _eval_variable(self, expr:syntax.Variable, env:Environment):
		return self._look_up(expr.name, expr, env)
	
	def _eval_assign(self, expr:syntax.Assign, env:Environment):
		value = self.evaluate(expr.value, env)
		distance = self._locals.get(expr)
		if distance is None: self.globals.assign(expr.name, value)
		else: env.assign_at(distance, expr.name, value)
		return value
	
	def _eval_unary(self, expr:syntax.Unary, env:Environment):
		right = self.evaluate(expr.right, env)
		if expr.op.kind == "BANG": return not is_truthy(right)
		_check_number_operand(expr.op, right)
		return -right
	
	def _eval_binary(self, expr:syntax.Binary, env:Environment):
		left = self.evaluate(expr.left, env)
		right = self.evaluate(expr.right, env)
		kind = expr.op.kind
		if kind == "EQUAL_EQUAL": return is_equal(left, right)
		if kind == "BANG_EQUAL": return not is_equal(left, right)
		if kind == "PLUS":
			if is_number(left) and is_number(right): return left + right
			if isinstance(left, str) and isinstance(right, str): return left + right
			raise LoxTypeError(expr.op, "Operands must be two numbers or two strings.")
		_check_number_operands(expr.op, left, right)
		return PRIMITIVE_BINARY[kind](left, right)
	
	def _eval_logical(self, expr:syntax.Logical, env:Environment):
		left = self.evaluate(expr.left, env)
		if is_truthy(left) == SHORTCUT[expr.op.kind]: return left
		return self.evaluate(expr.right, env)
	
	def _eval_call(self, expr:syntax.Call, env:Environment):
		callee = self.evaluate(expr.callee, env)
		args = [self.evaluate(a, env) for a in expr.args]
		if not isinstance(callee, LoxCallable):
			raise NotCallable(expr.paren)
		if len(args) != callee.arity():
			raise ArityError(expr.paren, callee.arity(), len(args))
		try: return callee.call(self, args)
		except RecursionError:
			raise StackOverflow(expr.paren) from None
	
	def _eval_get(self, expr:syntax.Get, env:Environment):
		subject = self.evaluate(expr.object, env)
		if isinstance(subject, LoxInstance): return subject.get(expr.name)
		raise LoxTypeError(expr.name, "Only instances have properties.")
	
	def _eval_set(self, expr:syntax.Set, env:Environment):
		subject = self.evaluate(expr.object, env)
		if not isinstance(subject, LoxInstance):
			raise LoxTypeError(expr.name, "Only instances have fields.")
		value = self.evaluate(expr.value, env)
		subject.set(expr.name, value)
		return value
	
	def _eval_this(self, expr:syntax.This, env:Environment):
		return self._look_up(expr.keyword, expr, env)
	
	def _eval_super(self, expr:syntax.Super, env:Environment):
		# The class body's `super` scope sits exactly one link beyond the `this` scope.
		distance = self._locals[expr]
		superclass = env.get_at(distance, "super")
		instance = env.get_at(distance - 1, "this")
		method = superclass.find_method(expr.method.text)
		if method is None: raise UndefinedProperty(expr.method)
		return method.bind(instance)
	
	###########################################################################
	
	def _exec_expression(self, stmt:syntax.Expression, env:Environment):
		self.evaluate(stmt.expr, env)
	
	def _exec_print(self, stmt:syntax.Print, env:Environment):
		self._emit(stringify(self.evaluate(stmt.expr, env)))
	
	def _exec_var(self, stmt:syntax.Var, env:Environment):
		value = None if stmt.initializer is None else self.evaluate(stmt.initializer, env)
		env.define(stmt.name.text, value)
	
	def _exec_block(self, stmt:syntax.Block, env:Environment):
		return self.execute_block(stmt.statements, Environment(env))
	
	def _exec_if(self, stmt:syntax.If, env:Environment):
		if is_truthy(self.evaluate(stmt.condition, env)):
			return self.execute(stmt.then_branch, env)
		elif stmt.else_branch is not None:
			return self.execute(stmt.else_branch, env)
	
	def _exec_while(self, stmt:syntax.While, env:Environment):
		while is_truthy(self.evaluate(stmt.condition, env)):
			signal = self.execute(stmt.body, env)
			if signal is not None: return signal
	
	def _exec_function(self, stmt:syntax.Function, env:Environment):
		env.define(stmt.name.text, UserFunction(stmt, env))
	
	def _exec_return(self, stmt:syntax.Return, env:Environment):
		value = None if stmt.value is None else self.evaluate(stmt.value, env)
		return Returning(value)
	
	def _exec_class(self, stmt:syntax.Class, env:Environment):
		superclass = None
		if stmt.superclass is not None:
			superclass = self.evaluate(stmt.superclass, env)
			if not isinstance(superclass, LoxClass):
				raise LoxTypeError(stmt.superclass.name, "Superclass must be a class.")
		env.define(stmt.name.text, None)
		
		method_env = env
		if superclass is not None:
			method_env = Environment(env)
			method_env.define("super", superclass)
		methods = {
			m.name.text: UserFunction(m, method_env, m.name.text == INITIALIZER)
			for m in stmt.methods
		}
		env.assign(stmt.name, LoxClass(stmt.name.text, superclass, methods))

def attach_evaluation_methods(python_scope):
	for _k, _v in list(python_scope.items()):
		if _k.startswith("_eval_"):
			_t = _v.__annotations__["expr"]
			assert isinstance(_t, type), (_k, _t)
			EVALUATE[_t] = _v
		elif _k.startswith("_exec_"):
			_t = _v.__annotations__["stmt"]
			assert isinstance(_t, type), (_k, _t)
			EXECUTE[_t] = _v

attach_evaluation_methods(vars(Interpreter))
assert set(EVALUATE) == set(syntax.EXPRESSION_TYPES), set(syntax.EXPRESSION_TYPES) - set(EVALUATE)
assert set(EXECUTE) == set(syntax.STATEMENT_TYPES), set(syntax.STATEMENT_TYPES) - set(EXECUTE)
