import unittest

from lox import syntax
from lox.front_end import parse_text
from lox.resolution import Resolver, resolve
from common import Silence, run_lox

def _resolve(text):
	report = Silence()
	program = parse_text(text, report)
	assert report.ok(), report.issues
	distances = Resolver(report).resolve_program(program)
	return program, distances, report

class DistanceTests(unittest.TestCase):
	""" The resolver's map should agree with the nesting the run-time will build. """
	
	def test_globals_stay_unresolved(self):
		program, distances, report = _resolve("var a = 1; print a;")
		self.assertTrue(report.ok())
		self.assertEqual({}, distances)
	
	def test_block_locals(self):
		program, distances, report = _resolve("{ var a = 1; { print a; } print a; }")
		self.assertTrue(report.ok())
		inner_print = program[0].statements[1].statements[0]
		outer_print = program[0].statements[2]
		self.assertEqual(1, distances[inner_print.expr])
		self.assertEqual(0, distances[outer_print.expr])
	
	def test_closure_distance_counts_the_parameter_scope(self):
		program, distances, report = _resolve("""
			fun outer() {
				var x = 1;
				fun inner() { return x; }
				return inner;
			}
		""")
		self.assertTrue(report.ok())
		inner = program[0].body[1]
		self.assertEqual(1, distances[inner.body[0].value])
	
	def test_this_and_super(self):
		program, distances, report = _resolve("""
			class A { who() { return "A"; } }
			class B < A { who() { return super.who() + this.tag; } }
		""")
		self.assertTrue(report.ok())
		body = program[1].methods[0].body
		concat = body[0].value
		super_expr = concat.left.callee
		this_expr = concat.right.object
		self.assertIsInstance(super_expr, syntax.Super)
		self.assertEqual(2, distances[super_expr])
		self.assertEqual(1, distances[this_expr])
	
	def test_initializer_may_read_a_shadowed_local(self):
		program, distances, report = _resolve("{ var a = 1; { var a = a + 1; } }")
		self.assertTrue(report.ok())
		inner_var = program[0].statements[1].statements[0]
		self.assertEqual(1, distances[inner_var.initializer.left])
	
	def test_resolve_refuses_to_hand_over_a_sick_map(self):
		report = Silence()
		program = parse_text("return 1;", report)
		self.assertIsNone(resolve(program, report))

class ZooOfFail(unittest.TestCase):
	""" Tests that assert about failure modes. """
	
	def expect(self, cases):
		for kinds, text in cases:
			with self.subTest(text):
				program, distances, report = _resolve(text)
				self.assertEqual(kinds, report.kinds())
	
	def test_each_kind_of_complaint(self):
		self.expect([
			(["DuplicateDeclaration"], "{ var a = 1; var a = 2; }"),
			(["DuplicateDeclaration"], "fun f(a, a) {}"),
			(["DuplicateDeclaration"], "fun f(a) { var a; }"),
			(["SelfReferencingInitializer"], "{ var a = a; }"),
			(["SelfReferencingInitializer"], "var a = 1; { var a = a; }"),
			(["ReturnOutsideFunction"], "return;"),
			(["ReturnOutsideFunction"], "{ return 1; }"),
			(["ThisOutsideClass"], "print this;"),
			(["ThisOutsideClass"], "fun f() { return this; }"),
			(["SuperOutsideClass"], "super.x();"),
			(["SuperWithoutSuperclass"], "class A { f() { super.f(); } }"),
			(["InheritsFromItself"], "class A < A {}"),
		])
	
	def test_legal_things_are_not_complaints(self):
		self.expect([
			([], "var a = 1; var a = 2;"),
			([], "var a = a;"),
			([], "class A { init() { return; } }"),
			([], "fun f() { class C { m() { return this; } } return C; }"),
		])
	
	def test_complaints_accumulate(self):
		program, distances, report = _resolve("""
			return 1;
			{ var x = 1; var x = 2; }
			print this;
			{ var y = y; }
		""")
		self.assertEqual([
			"ReturnOutsideFunction",
			"DuplicateDeclaration",
			"ThisOutsideClass",
			"SelfReferencingInitializer",
		], report.kinds())
		self.assertEqual("[line 2] Error at 'return': Can't return from top-level code.", report.issues[0].intro)
		self.assertEqual("[line 3] Error at 'x': Already a variable with this name in this scope.", report.issues[1].intro)
	
	def test_no_interpretation_after_a_complaint(self):
		output, report = run_lox('print "before"; { var a = a; }')
		self.assertEqual([], output)
		self.assertTrue(report.sick())
		self.assertFalse(report.had_runtime_error)


if __name__ == '__main__':
	unittest.main()
