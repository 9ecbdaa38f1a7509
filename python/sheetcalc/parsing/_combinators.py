"""Backtracking parser combinators over arbitrary token sequences.

A :class:`Parser` describes every way a grammar rule can match at a given
position.  Running it yields ``(value, position)`` pairs lazily, so ambiguity
is represented by the number of results rather than by control flow, and a
driver that only wants the first full parse never pays for the others.

Usage::

    digits = one_or_more(digit).map(to_natural_number)
    parse(digits << eof(), "123")   # -> 123

Operator spelling:

==============  ====================================
``p | q``       alternative: results of ``p``, then results of ``q``
``p << q``      sequence, keep the value of ``p``
``p >> q``      sequence, keep the value of ``q``
``p.map(f)``    transform the value of ``p``
``apply(pf, p)``  ``pf`` yields functions, ``p`` their arguments
==============  ====================================
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from functools import reduce
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

A = TypeVar("A")
B = TypeVar("B")

Stream = Sequence[Any]
ParseFn = Callable[[Stream, int], Iterator[tuple[Any, int]]]


class Parser(Generic[A]):
    """A grammar rule: maps a stream position to all matches starting there."""

    __slots__ = ("_run",)

    def __init__(self, run: ParseFn) -> None:
        self._run = run

    def run(self, stream: Stream, position: int = 0) -> Iterator[tuple[A, int]]:
        """Yield every ``(value, next_position)`` this parser can produce."""
        return self._run(stream, position)

    def map(self, f: Callable[[A], B]) -> Parser[B]:
        return fmap(f, self)

    def __or__(self, other: Parser[A]) -> Parser[A]:
        return alternative(self, other)

    def __lshift__(self, other: Parser[Any]) -> Parser[A]:
        return discard_right(self, other)

    def __rshift__(self, other: Parser[B]) -> Parser[B]:
        return discard_left(self, other)


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


def satisfy(predicate: Callable[[Any], bool]) -> Parser[Any]:
    """Consume one element if *predicate* holds for it."""

    def run(stream: Stream, position: int) -> Iterator[tuple[Any, int]]:
        if position < len(stream):
            head = stream[position]
            if predicate(head):
                yield head, position + 1

    return Parser(run)


def token(expected: Any) -> Parser[Any]:
    """Consume exactly one element equal to *expected*."""
    return satisfy(lambda element: element == expected)


def pure(value: A) -> Parser[A]:
    """Succeed with *value* without consuming input."""

    def run(stream: Stream, position: int) -> Iterator[tuple[A, int]]:
        yield value, position

    return Parser(run)


def fail() -> Parser[Any]:
    """Never succeed."""

    def run(stream: Stream, position: int) -> Iterator[tuple[Any, int]]:
        return iter(())

    return Parser(run)


def eof() -> Parser[None]:
    """Succeed with ``None`` only at the end of the stream."""

    def run(stream: Stream, position: int) -> Iterator[tuple[None, int]]:
        if position >= len(stream):
            yield None, position

    return Parser(run)


def optional_transform(f: Callable[[Any], A | None]) -> Parser[A]:
    """Consume one element when ``f(element)`` is not None, yielding that value."""

    def run(stream: Stream, position: int) -> Iterator[tuple[A, int]]:
        if position < len(stream):
            value = f(stream[position])
            if value is not None:
                yield value, position + 1

    return Parser(run)


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


def apply(pf: Parser[Callable[[B], A]], px: Parser[B]) -> Parser[A]:
    """Run *pf* then *px* on the rest, applying each function to each value.

    Every other form of sequencing is written in terms of this one.
    """

    def run(stream: Stream, position: int) -> Iterator[tuple[A, int]]:
        for f, rest in pf.run(stream, position):
            for x, remainder in px.run(stream, rest):
                yield f(x), remainder

    return Parser(run)


def alternative(left: Parser[A], right: Parser[A]) -> Parser[A]:
    """All results of *left* followed by all results of *right*.

    Both branches are explored on the same input; neither commits.
    """

    def run(stream: Stream, position: int) -> Iterator[tuple[A, int]]:
        yield from left.run(stream, position)
        yield from right.run(stream, position)

    return Parser(run)


def fmap(f: Callable[[A], B], p: Parser[A]) -> Parser[B]:
    return apply(pure(f), p)


def constant(value: A, p: Parser[Any]) -> Parser[A]:
    """Run *p* but replace its value with *value*."""
    return pure(value) << p


def discard_right(p: Parser[A], q: Parser[Any]) -> Parser[A]:
    return apply(fmap(lambda x: lambda _: x, p), q)


def discard_left(p: Parser[Any], q: Parser[B]) -> Parser[B]:
    return apply(fmap(lambda _: lambda y: y, p), q)


def apply_to(p: Parser[A], q: Parser[Callable[[A], B]]) -> Parser[B]:
    """Run *p* then *q*, applying the function from *q* to the value from *p*."""
    return apply(fmap(lambda x: lambda f: f(x), p), q)


def curry(f: Callable[..., A], arity: int) -> Callable[[Any], Any]:
    """Turn an *arity*-argument function into a chain of one-argument ones."""

    def collect(args: tuple[Any, ...]) -> Any:
        if len(args) == arity:
            return f(*args)
        return lambda x: collect(args + (x,))

    return collect(())


def lift(f: Callable[..., A], *parsers: Parser[Any]) -> Parser[A]:
    """Run *parsers* in sequence and combine their values with *f*."""
    result: Parser[Any] = pure(curry(f, len(parsers)))
    for p in parsers:
        result = apply(result, p)
    return result


def optional(p: Parser[A], default: A) -> Parser[A]:
    return p | pure(default)


def optionally_apply(required: Parser[A], optional_step: Parser[Callable[[A], A]]) -> Parser[A]:
    """Run *required*, then apply *optional_step*'s function if it matches."""
    return apply_to(required, optional(optional_step, lambda x: x))


def one_of(parsers: Iterable[Parser[A]]) -> Parser[A]:
    return reduce(alternative, parsers, fail())


def lazy(factory: Callable[[], Parser[A]]) -> Parser[A]:
    """Defer building a parser until it is run.

    Needed for recursive rules, which would otherwise recurse while the
    grammar is being constructed.
    """

    def run(stream: Stream, position: int) -> Iterator[tuple[A, int]]:
        return factory().run(stream, position)

    return Parser(run)


def _prepend(head: A, tail: list[A]) -> list[A]:
    return [head, *tail]


def zero_or_more(p: Parser[A]) -> Parser[list[A]]:
    """Consecutive matches of *p*, longest first, down to the empty list."""
    return optional(lift(_prepend, p, lazy(lambda: zero_or_more(p))), [])


def one_or_more(p: Parser[A]) -> Parser[list[A]]:
    return lift(_prepend, p, zero_or_more(p))


def many(p: Parser[A], minimum: int = 0) -> Parser[list[A]]:
    """Longest run of consecutive matches of *p*, and nothing shorter.

    Takes the first result of *p* at each step and loops instead of
    recursing, so a failing caller never backtracks into the run.
    """

    def run(stream: Stream, position: int) -> Iterator[tuple[list[A], int]]:
        values: list[A] = []
        while True:
            match = next(p.run(stream, position), None)
            if match is None or match[1] == position:
                break
            value, position = match
            values.append(value)
        if len(values) >= minimum:
            yield values, position

    return Parser(run)


def many1(p: Parser[A]) -> Parser[list[A]]:
    return many(p, 1)


def first_match(p: Parser[A]) -> Parser[A]:
    """Commit to the first result of *p*."""

    def run(stream: Stream, position: int) -> Iterator[tuple[A, int]]:
        match = next(p.run(stream, position), None)
        if match is not None:
            yield match

    return Parser(run)


def tokens(expected: Sequence[Any]) -> Parser[list[Any]]:
    """Match *expected* element by element."""
    if not expected:
        return pure([])
    return lift(_prepend, token(expected[0]), tokens(expected[1:]))


# ---------------------------------------------------------------------------
# Character parsers
# ---------------------------------------------------------------------------


def string(s: str) -> Parser[str]:
    return constant(s, tokens(s))


def characters(predicate: Callable[[str], bool]) -> Parser[str]:
    return satisfy(predicate)


whitespace = characters(str.isspace)

capital = characters(str.isupper)

digit = one_of([constant(d, string(str(d))) for d in range(10)])


def to_natural_number(digits: Iterable[int]) -> int:
    return reduce(lambda acc, d: acc * 10 + d, digits, 0)


natural_number = many1(digit).map(to_natural_number)


def ignore_leading_whitespace(p: Parser[A]) -> Parser[A]:
    return many(whitespace) >> p


# ---------------------------------------------------------------------------
# Drivers
# ---------------------------------------------------------------------------


def parse_all(parser: Parser[A], stream: Stream) -> Iterator[A]:
    """Lazily yield every result of *parser* that consumes all of *stream*."""
    for value, _ in (parser << eof()).run(stream, 0):
        yield value


def parse(parser: Parser[A], stream: Stream) -> A | None:
    """First result of *parser* that consumes all of *stream*, or None.

    Alternatives are enumerated left branch first, depth first.
    """
    try:
        for value in parse_all(parser, stream):
            return value
    except RecursionError:
        logger.debug("Input too deeply nested to parse (%d elements)", len(stream))
    return None
