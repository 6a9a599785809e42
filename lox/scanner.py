"""
Turn source text into a list of tokens.

The lexicon is a boozetools scanner definition. Each rule's action
puts a finished Token in the semantic slot; line numbers are filled
in afterward from the token offsets.

Lexical errors go to the report and scanning carries on,
so one pass finds every stray character in the file.
"""
import sys
from bisect import bisect_right
from boozetools.scanning import miniscan
from boozetools.scanning.engine import IterableScanner
from .ontology import Token
from .diagnostics import Report

PUNCTUATION = {
	"(": "LEFT_PAREN", ")": "RIGHT_PAREN",
	"{": "LEFT_BRACE", "}": "RIGHT_BRACE",
	",": "COMMA", ".": "DOT", ";": "SEMICOLON",
	"-": "MINUS", "+": "PLUS", "*": "STAR", "/": "SLASH",
	"!": "BANG", "!=": "BANG_EQUAL",
	"=": "EQUAL", "==": "EQUAL_EQUAL",
	"<": "LESS", "<=": "LESS_EQUAL",
	">": "GREATER", ">=": "GREATER_EQUAL",
}

RESERVED = frozenset("""
	and class else false for fun if nil or print return super this true var while
""".split())

# Not a real token kind. The scan reports these and drops them.
LEXICAL_ERROR = "<error>"

LEXICON = miniscan.Definition()
LEXICON.ignore(r'\s+')
LEXICON.ignore(r'\/\/[^\n]*')

def _emit(yy: IterableScanner, kind:str, literal=None):
	yy.token(kind, Token(kind, yy.match(), literal, 0, yy.slice().start))

@LEXICON.on(r'\(|\)|\{|\}|,|\.|;|\-|\+|\*|\/|[!=<>]=?')
def scan_punctuation(yy: IterableScanner): _emit(yy, PUNCTUATION[yy.match()])

@LEXICON.on(r'\d+(\.\d+)?')
def scan_number(yy: IterableScanner): _emit(yy, "NUMBER", float(yy.match()))

@LEXICON.on(r'"[^"]*"')
def scan_string(yy: IterableScanner): _emit(yy, "STRING", yy.match()[1:-1])

@LEXICON.on(r'[A-Za-z_][A-Za-z_0-9]*')
def scan_word(yy: IterableScanner):
	word = sys.intern(yy.match())
	_emit(yy, word.upper() if word in RESERVED else "IDENTIFIER")

@LEXICON.on(r'"[^"]*')
def scan_open_string(yy: IterableScanner): _emit(yy, LEXICAL_ERROR, "Unterminated string.")

@LEXICON.on(r'.')
def scan_stray(yy: IterableScanner): _emit(yy, LEXICAL_ERROR, "Unexpected character.")

def scan_text(text:str, report:Report) -> list[Token]:
	line_starts = [0]
	line_starts.extend(i+1 for i, c in enumerate(text) if c == "\n")
	tokens = []
	for item in LEXICON.scan(text):
		token = item[1]
		token.line = bisect_right(line_starts, token.offset)
		if token.kind == LEXICAL_ERROR: report.error_at_line(token.line, token.literal)
		else: tokens.append(token)
	tokens.append(Token("EOF", "", None, len(line_starts), len(text)))
	return tokens
