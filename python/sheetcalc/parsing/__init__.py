"""sheetcalc.parsing - Parser combinators, tokenizer and expression grammar."""

from sheetcalc.parsing._combinators import Parser, parse, parse_all
from sheetcalc.parsing._grammar import expression, parse_expression, parse_tokens
from sheetcalc.parsing._tokenizer import tokenize, tokenize_text

__all__ = [
    "Parser",
    "expression",
    "parse",
    "parse_all",
    "parse_expression",
    "parse_tokens",
    "tokenize",
    "tokenize_text",
]
