"""
A tree-walking interpreter for Lox, a small dynamically-typed scripting language
with block scope, first-class functions, closures, and single-inheritance classes.
"""
