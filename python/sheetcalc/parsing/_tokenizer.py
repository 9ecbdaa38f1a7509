"""Character-level tokenizer for cell formulas."""

from __future__ import annotations

from sheetcalc._types import (
    FunctionNameToken,
    NumberToken,
    OperatorToken,
    PunctuationToken,
    ReferenceToken,
    Token,
)
from sheetcalc.parsing._combinators import (
    Parser,
    capital,
    first_match,
    ignore_leading_whitespace,
    lift,
    many,
    many1,
    natural_number,
    one_of,
    parse,
    string,
    whitespace,
    zero_or_more,
)

OPERATORS = ("*", "/", "+", "-", ":")
PUNCTUATION = ("(", ")")

# Digit and letter runs never give back characters: "123" is always the
# number 123, never 12 followed by 3.
t_number = natural_number.map(NumberToken)
t_operator = one_of([string(s) for s in OPERATORS]).map(OperatorToken)
# Column letter immediately followed by the row number: A12
t_reference = lift(ReferenceToken, capital, natural_number)
t_punctuation = one_of([string(s) for s in PUNCTUATION]).map(PunctuationToken)
t_name = many1(capital).map(lambda letters: FunctionNameToken("".join(letters)))

# The first kind that matches wins, so "A12" is a reference rather than the
# name "A" followed by the number 12, and "AB12" is the name "AB" then 12.
t_token = first_match(t_number | t_operator | t_reference | t_punctuation | t_name)


def tokenize() -> Parser[list[Token]]:
    """Parser turning characters into tokens, skipping surrounding whitespace."""
    return zero_or_more(ignore_leading_whitespace(t_token)) << many(whitespace)


def tokenize_text(text: str) -> list[Token] | None:
    """Tokenize *text*, or return None if some part of it is not a token."""
    return parse(tokenize(), text)
