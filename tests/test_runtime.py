import unittest
from unittest import mock

from lox.ontology import Token
from lox.tree_walker import runtime
from lox.tree_walker.runtime import stringify, is_equal, is_truthy
from lox.tree_walker.values import LoxClass, LoxInstance, UserFunction
from lox.tree_walker.types import UndefinedProperty
from common import Silence, run_lox

class Behavior(unittest.TestCase):
	""" Run little programs and look at what they print. """
	
	def expect(self, expected:list[str], text:str):
		output, report = run_lox(text)
		report.assert_no_issues("Ostensibly-good example failed to resolve.")
		self.assertIsNone(report.runtime_issue, report.runtime_issue)
		self.assertEqual(expected, output)
	
	def fail_with(self, kind:str, text:str, line:int=1):
		output, report = run_lox(text)
		self.assertTrue(report.ok(), report.issues)
		self.assertTrue(report.had_runtime_error)
		self.assertEqual(kind, report.runtime_issue.kind)
		self.assertTrue(report.runtime_issue.intro.endswith("[line %d]" % line), report.runtime_issue.intro)
		return output, report
	
	def test_printing(self):
		self.expect(["2", "2.5", "nil", "true", "false", "ab", "-3", "0.5"], """
			print 1 + 1;
			print 2.5;
			print nil;
			print true;
			print !true;
			print "a" + "b";
			print -3;
			print 1 / 2;
		""")
	
	def test_printing_callables(self):
		self.expect(["<fn f>", "<native fn>", "A", "A instance", "<fn m>"], """
			fun f() {}
			class A { m() {} }
			print f;
			print clock;
			print A;
			print A();
			print A().m;
		""")
	
	def test_scoping(self):
		self.expect(["2", "1"], "{ var a=1; { var a=a+1; print a; } print a; }")
	
	def test_deep_recursion(self):
		self.expect(["1000"], """
			fun count(n) { if (n <= 0) return 0; return 1 + count(n - 1); }
			print count(1000);
		""")
	
	def test_global_redeclaration_overwrites(self):
		self.expect(["2"], "var a = 1; var a = 2; print a;")
	
	def test_truthiness(self):
		self.expect(["yes", "yes", "no", "no"], """
			if (0) print "yes"; else print "no";
			if ("") print "yes"; else print "no";
			if (nil) print "yes"; else print "no";
			if (false) print "yes"; else print "no";
		""")
	
	def test_logic_short_circuits(self):
		self.expect(["hi", "nil", "1"], """
			var touched = 1;
			fun touch() { touched = touched + 1; return true; }
			print "hi" or touch();
			print nil and touch();
			print touched;
		""")
	
	def test_equality_never_throws(self):
		self.expect(["false", "false", "true", "true", "false"], """
			print 1 == "1";
			print true == 1;
			print nil == nil;
			print "x" == "x";
			print nil != nil;
		""")
	
	def test_while_and_for(self):
		self.expect(["0", "1", "2", "3", "2", "1"], """
			for (var i = 0; i < 3; i = i + 1) print i;
			var n = 3;
			while (n > 0) { print n; n = n - 1; }
		""")
	
	def test_recursion(self):
		self.expect(["55"], """
			fun fib(n) { if (n < 2) return n; return fib(n - 2) + fib(n - 1); }
			print fib(10);
		""")
	
	def test_return_unwinds_loops_and_blocks(self):
		self.expect(["3", "after"], """
			var x = "after";
			fun first() {
				for (var i = 0; ; i = i + 1) {
					{ if (i == 3) return i; }
				}
			}
			print first();
			print x;
		""")
	
	def test_function_without_return_gives_nil(self):
		self.expect(["nil", "nil"], """
			fun f() {}
			fun g() { return; }
			print f();
			print g();
		""")
	
	def test_independent_closures(self):
		self.expect(["1", "2", "1", "3"], """
			fun makeCounter() {
				var i = 0;
				fun count() { i = i + 1; return i; }
				return count;
			}
			var a = makeCounter();
			var b = makeCounter();
			print a();
			print a();
			print b();
			print a();
		""")
	
	def test_closures_share_their_environment(self):
		self.expect(["2"], """
			var get; var set;
			fun pair() {
				var v = 1;
				fun g() { return v; }
				fun s(x) { v = x; }
				get = g; set = s;
			}
			pair();
			set(2);
			print get();
		""")
	
	def test_closure_sees_static_not_dynamic_scope(self):
		self.expect(["global", "global"], """
			var a = "global";
			{
				fun show() { print a; }
				show();
				var a = "block";
				show();
			}
		""")
	
	def test_inheritance_and_super(self):
		self.expect(["AB"], """
			class A { who() { return "A"; } }
			class B < A { who() { return super.who() + "B"; } }
			print B().who();
		""")
	
	def test_super_skips_overrides_in_deeper_subclasses(self):
		self.expect(["A method", "A method"], """
			class A { method() { print "A method"; } }
			class B < A { method() { print "B method"; } test() { super.method(); } }
			class C < B {}
			C().test();
			B().test();
		""")
	
	def test_initializer(self):
		self.expect(["3", "true", "Point instance"], """
			class Point {
				init(x, y) { this.x = x; this.y = y; return; }
				sum() { return this.x + this.y; }
			}
			var p = Point(1, 2);
			print p.sum();
			print p.init(5, 6) == p;
			print p;
		""")
	
	def test_initializer_return_value_is_discarded(self):
		self.expect(["Thing instance"], """
			class Thing { init() { return 42; } }
			print Thing();
		""")
	
	def test_inherited_initializer_sets_arity(self):
		self.expect(["7"], """
			class A { init(n) { this.n = n; } }
			class B < A {}
			print B(7).n;
		""")
	
	def test_fields_shadow_methods(self):
		self.expect(["method", "field"], """
			class A { m() { return "method"; } }
			var a = A();
			print a.m();
			a.m = "field";
			print a.m;
		""")
	
	def test_bound_methods_remember_this(self):
		self.expect(["Jane"], """
			class Person { init(name) { this.name = name; } say() { print this.name; } }
			var m = Person("Jane").say;
			m();
		""")
	
	def test_this_inside_nested_function(self):
		self.expect(["box"], """
			class Box {
				getter() { fun inner() { return this.label; } return inner; }
			}
			var b = Box();
			b.label = "box";
			print b.getter()();
		""")
	
	def test_division_by_zero_follows_ieee(self):
		self.expect(["inf", "-inf", "nan"], "print 1/0; print -1/0; print 0/0;")
	
	def test_clock(self):
		with mock.patch("lox.primitive.time.time", return_value=12.0):
			self.expect(["12", "true"], "print clock(); print clock() > 1;")

class RuntimeErrors(unittest.TestCase):
	fail_with = Behavior.fail_with
	
	def test_type_errors(self):
		for text, message in [
			('"a" - 1;', "Operands must be numbers."),
			('1 + "a";', "Operands must be two numbers or two strings."),
			('-"a";', "Operand must be a number."),
			('1 < "2";', "Operands must be numbers."),
			('var x = 1; x.y;', "Only instances have properties."),
			('var x = "s"; x.y = 1;', "Only instances have fields."),
			('var NotAClass = 1; class B < NotAClass {}', "Superclass must be a class."),
		]:
			with self.subTest(text):
				output, report = self.fail_with("LoxTypeError", text)
				self.assertEqual(message, report.runtime_issue.intro.splitlines()[0])
	
	def test_arity(self):
		output, report = self.fail_with("ArityError", "fun f(a, b) {}\nf(1);", line=2)
		self.assertEqual("Expected 2 arguments but got 1.\n[line 2]", report.runtime_issue.intro)
	
	def test_class_arity(self):
		self.fail_with("ArityError", "class A {} A(1);")
	
	def test_not_callable(self):
		self.fail_with("NotCallable", '"text"();')
	
	def test_arguments_evaluate_before_the_callable_check(self):
		output, report = self.fail_with("NotCallable", 'fun noisy() { print "evaluated"; } nil(noisy());')
		self.assertEqual(["evaluated"], output)
	
	def test_undefined_variable(self):
		output, report = self.fail_with("UndefinedVariable", "print 1;\nprint nope;", line=2)
		self.assertEqual(["1"], output)
		self.assertEqual("Undefined variable 'nope'.\n[line 2]", report.runtime_issue.intro)
	
	def test_assignment_never_declares(self):
		self.fail_with("UndefinedVariable", "nope = 1;")
	
	def test_undefined_property(self):
		self.fail_with("UndefinedProperty", "class A {} A().missing;")
	
	def test_undefined_super_method(self):
		self.fail_with("UndefinedProperty", "class A {} class B < A { m() { return super.m(); } } B().m();")
	
	def test_runaway_recursion(self):
		output, report = self.fail_with("StackOverflow", "fun f() { return f(); }\nf();")
		self.assertEqual("Stack overflow.\n[line 1]", report.runtime_issue.intro)
	
	def test_error_halts_the_whole_run(self):
		output, report = self.fail_with("LoxTypeError", 'print "one";\n-nil;\nprint "three";', line=2)
		self.assertEqual(["one"], output)
	
	def test_error_inside_call_leaves_globals_usable(self):
		report = Silence()
		output = []
		interpreter = runtime.Interpreter(report, output.append)
		from lox.tree_walker.executive import run_text
		self.assertFalse(run_text("var a = 1; fun f() { var a = 2; return -nil; } f();", interpreter, report))
		report.reset()
		self.assertTrue(run_text("print a;", interpreter, report))
		self.assertEqual(["1"], output)

class Helpers(unittest.TestCase):
	def test_stringify(self):
		for value, text in [(None, "nil"), (True, "true"), (3.0, "3"), (-0.5, "-0.5"), ("s", "s"), (1e21, "1e+21")]:
			with self.subTest(value):
				self.assertEqual(text, stringify(value))
	
	def test_is_equal_is_type_strict(self):
		self.assertFalse(is_equal(1.0, True))
		self.assertFalse(is_equal(0.0, False))
		self.assertFalse(is_equal(None, False))
		self.assertTrue(is_equal(None, None))
		self.assertTrue(is_equal(2.0, 2.0))
	
	def test_is_truthy(self):
		self.assertFalse(is_truthy(None))
		self.assertFalse(is_truthy(False))
		for v in (0.0, "", True, LoxClass("A", None, {})):
			self.assertTrue(is_truthy(v))
	
	def test_missing_property_on_bare_instance(self):
		instance = LoxInstance(LoxClass("A", None, {}))
		with self.assertRaises(UndefinedProperty):
			instance.get(Token("IDENTIFIER", "x", None, 1))
	
	def test_find_method_delegates_to_superclass(self):
		sentinel = mock.Mock(spec=UserFunction)
		base = LoxClass("Base", None, {"m": sentinel})
		derived = LoxClass("Derived", base, {})
		self.assertIs(sentinel, derived.find_method("m"))
		self.assertIsNone(derived.find_method("other"))
	
	def test_dispatch_tables_cover_every_node(self):
		from lox import syntax
		self.assertEqual(set(syntax.EXPRESSION_TYPES), set(runtime.EVALUATE))
		self.assertEqual(set(syntax.STATEMENT_TYPES), set(runtime.EXECUTE))


if __name__ == '__main__':
	unittest.main()
