"""
Build the primitive namespace.
There is not much in it: Lox has exactly one native function.
"""
import time
from .environment import Environment
from .tree_walker.values import NativeFunction

def _clock() -> float:
	return time.time()

NATIVES = [
	NativeFunction("clock", 0, _clock),
]

def root_environment() -> Environment:
	env = Environment()
	for native in NATIVES: env.define(native.name, native)
	return env
