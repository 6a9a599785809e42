"""
Recursive-descent parser: tokens in, statements out.

On a syntax error the parser reports, then skips to the next likely
statement boundary and carries on, so one run surfaces several problems.
"""
from typing import Optional
from . import syntax
from .ontology import Token
from .diagnostics import Report
from .scanner import scan_text

MAX_ARGUMENTS = 255

class LoxParseError(Exception):
	""" Internal signal to unwind to the nearest declaration and resynchronize. """
	pass

_STATEMENT_STARTERS = frozenset(["CLASS", "FUN", "VAR", "FOR", "IF", "WHILE", "PRINT", "RETURN"])

class Parser:
	def __init__(self, tokens:list[Token], report:Report):
		self._tokens = tokens
		self._report = report
		self._pos = 0
	
	def parse(self) -> list[syntax.Stmt]:
		statements = []
		while not self._at_end():
			decl = self._declaration()
			if decl is not None: statements.append(decl)
		return statements
	
	# Token-stream plumbing
	
	def _peek(self) -> Token: return self._tokens[self._pos]
	def _previous(self) -> Token: return self._tokens[self._pos - 1]
	def _at_end(self): return self._peek().kind == "EOF"
	def _check(self, kind:str): return self._peek().kind == kind
	
	def _advance(self) -> Token:
		if not self._at_end(): self._pos += 1
		return self._previous()
	
	def _match(self, *kinds:str) -> bool:
		if self._peek().kind in kinds:
			self._advance()
			return True
		return False
	
	def _consume(self, kind:str, message:str) -> Token:
		if self._check(kind): return self._advance()
		raise self._error(self._peek(), message)
	
	def _error(self, token:Token, message:str) -> LoxParseError:
		self._report.error_at(token, message)
		return LoxParseError()
	
	def _synchronize(self):
		self._advance()
		while not self._at_end():
			if self._previous().kind == "SEMICOLON": return
			if self._peek().kind in _STATEMENT_STARTERS: return
			self._advance()
	
	# Declarations
	
	def _declaration(self) -> Optional[syntax.Stmt]:
		try:
			if self._match("CLASS"): return self._class_declaration()
			if self._match("FUN"): return self._function("function")
			if self._match("VAR"): return self._var_declaration()
			return self._statement()
		except LoxParseError:
			self._synchronize()
			return None
	
	def _class_declaration(self) -> syntax.Class:
		name = self._consume("IDENTIFIER", "Expect class name.")
		superclass = None
		if self._match("LESS"):
			self._consume("IDENTIFIER", "Expect superclass name.")
			superclass = syntax.Variable(self._previous())
		self._consume("LEFT_BRACE", "Expect '{' before class body.")
		methods = []
		while not self._check("RIGHT_BRACE") and not self._at_end():
			methods.append(self._function("method"))
		self._consume("RIGHT_BRACE", "Expect '}' after class body.")
		return syntax.Class(name, superclass, methods)
	
	def _function(self, kind:str) -> syntax.Function:
		name = self._consume("IDENTIFIER", "Expect %s name." % kind)
		self._consume("LEFT_PAREN", "Expect '(' after %s name." % kind)
		params = []
		if not self._check("RIGHT_PAREN"):
			params.append(self._consume("IDENTIFIER", "Expect parameter name."))
			while self._match("COMMA"):
				if len(params) >= MAX_ARGUMENTS:
					self._error(self._peek(), "Can't have more than %d parameters." % MAX_ARGUMENTS)
				params.append(self._consume("IDENTIFIER", "Expect parameter name."))
		self._consume("RIGHT_PAREN", "Expect ')' after parameters.")
		self._consume("LEFT_BRACE", "Expect '{' before %s body." % kind)
		return syntax.Function(name, params, self._block())
	
	def _var_declaration(self) -> syntax.Var:
		name = self._consume("IDENTIFIER", "Expect variable name.")
		initializer = self._expression() if self._match("EQUAL") else None
		self._consume("SEMICOLON", "Expect ';' after variable declaration.")
		return syntax.Var(name, initializer)
	
	# Statements
	
	def _statement(self) -> syntax.Stmt:
		if self._match("FOR"): return self._for_statement()
		if self._match("IF"): return self._if_statement()
		if self._match("PRINT"): return self._print_statement()
		if self._match("RETURN"): return self._return_statement()
		if self._match("WHILE"): return self._while_statement()
		if self._match("LEFT_BRACE"): return syntax.Block(self._block())
		return self._expression_statement()
	
	def _for_statement(self) -> syntax.Stmt:
		keyword = self._previous()
		self._consume("LEFT_PAREN", "Expect '(' after 'for'.")
		if self._match("SEMICOLON"): initializer = None
		elif self._match("VAR"): initializer = self._var_declaration()
		else: initializer = self._expression_statement()
		
		condition = None if self._check("SEMICOLON") else self._expression()
		self._consume("SEMICOLON", "Expect ';' after loop condition.")
		increment = None if self._check("RIGHT_PAREN") else self._expression()
		self._consume("RIGHT_PAREN", "Expect ')' after for clauses.")
		body = self._statement()
		
		# There is no For node. It all comes down to While.
		if increment is not None:
			body = syntax.Block([body, syntax.Expression(increment)])
		if condition is None:
			condition = syntax.Literal(True, keyword)
		body = syntax.While(condition, body)
		if initializer is not None:
			body = syntax.Block([initializer, body])
		return body
	
	def _if_statement(self) -> syntax.If:
		self._consume("LEFT_PAREN", "Expect '(' after 'if'.")
		condition = self._expression()
		self._consume("RIGHT_PAREN", "Expect ')' after if condition.")
		then_branch = self._statement()
		else_branch = self._statement() if self._match("ELSE") else None
		return syntax.If(condition, then_branch, else_branch)
	
	def _print_statement(self) -> syntax.Print:
		value = self._expression()
		self._consume("SEMICOLON", "Expect ';' after value.")
		return syntax.Print(value)
	
	def _return_statement(self) -> syntax.Return:
		keyword = self._previous()
		value = None if self._check("SEMICOLON") else self._expression()
		self._consume("SEMICOLON", "Expect ';' after return value.")
		return syntax.Return(keyword, value)
	
	def _while_statement(self) -> syntax.While:
		self._consume("LEFT_PAREN", "Expect '(' after 'while'.")
		condition = self._expression()
		self._consume("RIGHT_PAREN", "Expect ')' after condition.")
		return syntax.While(condition, self._statement())
	
	def _expression_statement(self) -> syntax.Expression:
		expr = self._expression()
		self._consume("SEMICOLON", "Expect ';' after expression.")
		return syntax.Expression(expr)
	
	def _block(self) -> list[syntax.Stmt]:
		statements = []
		while not self._check("RIGHT_BRACE") and not self._at_end():
			decl = self._declaration()
			if decl is not None: statements.append(decl)
		self._consume("RIGHT_BRACE", "Expect '}' after block.")
		return statements
	
	# Expressions
	
	def _expression(self) -> syntax.Expr:
		return self._assignment()
	
	def _assignment(self) -> syntax.Expr:
		expr = self._or()
		if self._match("EQUAL"):
			equals = self._previous()
			value = self._assignment()
			if isinstance(expr, syntax.Variable):
				return syntax.Assign(expr.name, value)
			if isinstance(expr, syntax.Get):
				return syntax.Set(expr.object, expr.name, value)
			# Report, but there's no need to resynchronize.
			self._error(equals, "Invalid assignment target.")
		return expr
	
	def _or(self) -> syntax.Expr:
		expr = self._and()
		while self._match("OR"):
			op = self._previous()
			expr = syntax.Logical(expr, op, self._and())
		return expr
	
	def _and(self) -> syntax.Expr:
		expr = self._equality()
		while self._match("AND"):
			op = self._previous()
			expr = syntax.Logical(expr, op, self._equality())
		return expr
	
	def _binary_level(self, operand, *kinds:str) -> syntax.Expr:
		expr = operand()
		while self._match(*kinds):
			op = self._previous()
			expr = syntax.Binary(expr, op, operand())
		return expr
	
	def _equality(self): return self._binary_level(self._comparison, "BANG_EQUAL", "EQUAL_EQUAL")
	def _comparison(self): return self._binary_level(self._term, "GREATER", "GREATER_EQUAL", "LESS", "LESS_EQUAL")
	def _term(self): return self._binary_level(self._factor, "MINUS", "PLUS")
	def _factor(self): return self._binary_level(self._unary, "SLASH", "STAR")
	
	def _unary(self) -> syntax.Expr:
		if self._match("BANG", "MINUS"):
			op = self._previous()
			return syntax.Unary(op, self._unary())
		return self._call()
	
	def _call(self) -> syntax.Expr:
		expr = self._primary()
		while True:
			if self._match("LEFT_PAREN"):
				expr = self._finish_call(expr)
			elif self._match("DOT"):
				name = self._consume("IDENTIFIER", "Expect property name after '.'.")
				expr = syntax.Get(expr, name)
			else:
				return expr
	
	def _finish_call(self, callee:syntax.Expr) -> syntax.Call:
		args = []
		if not self._check("RIGHT_PAREN"):
			args.append(self._expression())
			while self._match("COMMA"):
				if len(args) >= MAX_ARGUMENTS:
					self._error(self._peek(), "Can't have more than %d arguments." % MAX_ARGUMENTS)
				args.append(self._expression())
		paren = self._consume("RIGHT_PAREN", "Expect ')' after arguments.")
		return syntax.Call(callee, paren, args)
	
	def _primary(self) -> syntax.Expr:
		token = self._peek()
		if self._match("FALSE"): return syntax.Literal(False, token)
		if self._match("TRUE"): return syntax.Literal(True, token)
		if self._match("NIL"): return syntax.Literal(None, token)
		if self._match("NUMBER", "STRING"): return syntax.Literal(token.literal, token)
		if self._match("THIS"): return syntax.This(token)
		if self._match("IDENTIFIER"): return syntax.Variable(token)
		if self._match("SUPER"):
			self._consume("DOT", "Expect '.' after 'super'.")
			method = self._consume("IDENTIFIER", "Expect superclass method name.")
			return syntax.Super(token, method)
		if self._match("LEFT_PAREN"):
			expr = self._expression()
			self._consume("RIGHT_PAREN", "Expect ')' after expression.")
			return syntax.Grouping(expr)
		raise self._error(token, "Expect expression.")

def parse_text(text:str, report:Report) -> list[syntax.Stmt]:
	""" Submit text to scanner and parser. Check the report before trusting the result. """
	tokens = scan_text(text, report)
	return Parser(tokens, report).parse()
