"""
The tree-walking run-time: it executes a resolved program directly from its syntax tree.
"""
