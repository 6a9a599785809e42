"""
So that `python -m lox program.lox` works the same as the `lox` console script.
"""
from .cmdline import main

main()
