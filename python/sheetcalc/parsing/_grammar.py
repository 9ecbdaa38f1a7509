"""Expression grammar: tokens to syntax tree.

Precedence, lowest first::

    expression   := sum
    sum          := product (('+' | '-') product)*
    product      := primitive (('*' | '/') primitive)*
    primitive    := number | reference | function_call | '(' expression ')'
    function_call := NAME '(' list ')'
    list         := reference ':' reference

Chains of ``+ -`` and ``* /`` fold to the left, so ``1-2-3`` is ``(1-2)-3``.
"""

from __future__ import annotations

import logging
from functools import reduce
from typing import Any

from sheetcalc._types import (
    BinaryExpression,
    Expression,
    FunctionCall,
    FunctionNameToken,
    Number,
    NumberToken,
    OperatorToken,
    PunctuationToken,
    Reference,
    ReferenceToken,
    Token,
)
from sheetcalc.parsing._combinators import (
    Parser,
    constant,
    lazy,
    lift,
    optional_transform,
    parse,
    token,
    zero_or_more,
)
from sheetcalc.parsing._tokenizer import tokenize_text

logger = logging.getLogger(__name__)

ExpressionParser = Parser[Expression]


def parenthesized(p: Parser[Any]) -> Parser[Any]:
    return token(PunctuationToken("(")) >> p << token(PunctuationToken(")"))


def op(symbol: str) -> Parser[str]:
    return constant(symbol, token(OperatorToken(symbol)))


def combine_operands(first: Expression, rest: list[tuple[str, Expression]]) -> Expression:
    """Left-fold ``first op1 e1 op2 e2 ...`` into nested binary expressions."""
    return reduce(lambda acc, pair: BinaryExpression(pair[0], acc, pair[1]), rest, first)


def _number(t: Token) -> Expression | None:
    if isinstance(t, NumberToken):
        return Number(t.value)
    return None


def _reference(t: Token) -> Expression | None:
    if isinstance(t, ReferenceToken):
        return Reference(t.column, t.row)
    return None


def _function_name(t: Token) -> str | None:
    if isinstance(t, FunctionNameToken):
        return t.name
    return None


def make_range(start: Expression, end: Expression) -> Expression:
    return BinaryExpression(":", start, end)


def _pair(symbol: str, operand: Expression) -> tuple[str, Expression]:
    return (symbol, operand)


p_number: ExpressionParser = optional_transform(_number)
p_reference: ExpressionParser = optional_transform(_reference)
p_function_name: Parser[str] = optional_transform(_function_name)

p_list = lift(make_range, p_reference << op(":"), p_reference)
p_function_call = lift(FunctionCall, p_function_name, parenthesized(p_list))
p_parenthesized = parenthesized(lazy(lambda: expression()))
p_primitive = p_number | p_reference | p_function_call | p_parenthesized

p_multiplier = lift(_pair, op("*") | op("/"), p_primitive)
p_product = lift(combine_operands, p_primitive, zero_or_more(p_multiplier))
p_summand = lift(_pair, op("-") | op("+"), p_product)
p_sum = lift(combine_operands, p_product, zero_or_more(p_summand))


def expression() -> ExpressionParser:
    """Root rule of the grammar."""
    return p_sum


def parse_tokens(tokens: list[Token]) -> Expression | None:
    return parse(expression(), tokens)


def parse_expression(text: str) -> Expression | None:
    """Parse cell text into an expression, or None on any syntax error."""
    tokens = tokenize_text(text)
    if tokens is None:
        logger.debug("Cannot tokenize %r", text)
        return None
    result = parse_tokens(tokens)
    if result is None:
        logger.debug("Cannot parse %r", text)
    return result
