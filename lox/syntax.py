"""
The set of parse-nodes in simple form.
The parser calls these constructors with subordinate semantic-values in a top-down descent.
Nodes are immutable by convention; later passes keep their findings in side tables keyed by node.
"""
from typing import Any, Optional, Sequence
from .ontology import Token, Phrase, Expr, Stmt

###############################################################################
# Expressions

class Literal(Expr):
	def __init__(self, value:Any, where:Token):
		self.value = value
		self._where = where
	def token(self): return self._where
	def __repr__(self): return "<lit:%r>" % (self.value,)

class Variable(Expr):
	def __init__(self, name:Token): self.name = name
	def token(self): return self.name
	def __repr__(self): return "<ref:%s>" % self.name.text

class Assign(Expr):
	def __init__(self, name:Token, value:Expr):
		self.name = name
		self.value = value
	def token(self): return self.name

class Binary(Expr):
	def __init__(self, left:Expr, op:Token, right:Expr):
		self.left, self.op, self.right = left, op, right
	def token(self): return self.op

class Logical(Expr):
	def __init__(self, left:Expr, op:Token, right:Expr):
		self.left, self.op, self.right = left, op, right
	def token(self): return self.op

class Unary(Expr):
	def __init__(self, op:Token, right:Expr):
		self.op, self.right = op, right
	def token(self): return self.op

class Grouping(Expr):
	def __init__(self, inner:Expr): self.inner = inner
	def token(self): return self.inner.token()

class Call(Expr):
	def __init__(self, callee:Expr, paren:Token, args:Sequence[Expr]):
		self.callee = callee
		self.paren = paren
		self.args = args
	def token(self): return self.paren

class Get(Expr):
	def __init__(self, object:Expr, name:Token):
		self.object = object
		self.name = name
	def token(self): return self.name

class Set(Expr):
	def __init__(self, object:Expr, name:Token, value:Expr):
		self.object = object
		self.name = name
		self.value = value
	def token(self): return self.name

class This(Expr):
	def __init__(self, keyword:Token): self.keyword = keyword
	def token(self): return self.keyword
	def __repr__(self): return "<this>"

class Super(Expr):
	def __init__(self, keyword:Token, method:Token):
		self.keyword = keyword
		self.method = method
	def token(self): return self.keyword
	def __repr__(self): return "<super.%s>" % self.method.text

###############################################################################
# Statements

class Expression(Stmt):
	def __init__(self, expr:Expr): self.expr = expr
	def token(self): return self.expr.token()

class Print(Stmt):
	def __init__(self, expr:Expr): self.expr = expr
	def token(self): return self.expr.token()

class Var(Stmt):
	def __init__(self, name:Token, initializer:Optional[Expr]):
		self.name = name
		self.initializer = initializer
	def token(self): return self.name

class Block(Stmt):
	def __init__(self, statements:Sequence[Stmt]): self.statements = statements
	def token(self): return self.statements[0].token() if self.statements else None

class If(Stmt):
	def __init__(self, condition:Expr, then_branch:Stmt, else_branch:Optional[Stmt]):
		self.condition = condition
		self.then_branch = then_branch
		self.else_branch = else_branch
	def token(self): return self.condition.token()

class While(Stmt):
	def __init__(self, condition:Expr, body:Stmt):
		self.condition = condition
		self.body = body
	def token(self): return self.condition.token()

class Function(Stmt):
	def __init__(self, name:Token, params:Sequence[Token], body:Sequence[Stmt]):
		self.name = name
		self.params = params
		self.body = body
	def token(self): return self.name
	def __repr__(self): return "<fun %s/%d>" % (self.name.text, len(self.params))

class Return(Stmt):
	def __init__(self, keyword:Token, value:Optional[Expr]):
		self.keyword = keyword
		self.value = value
	def token(self): return self.keyword

class Class(Stmt):
	def __init__(self, name:Token, superclass:Optional[Variable], methods:Sequence[Function]):
		self.name = name
		self.superclass = superclass
		self.methods = methods
	def token(self): return self.name
	def __repr__(self): return "<class %s>" % self.name.text

EXPRESSION_TYPES = (Literal, Variable, Assign, Binary, Logical, Unary, Grouping, Call, Get, Set, This, Super)
STATEMENT_TYPES = (Expression, Print, Var, Block, If, While, Function, Return, Class)
