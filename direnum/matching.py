# direnum/direnum/matching.py
"""
Reference implementation of the filename matching rules enumerators must honor.

Two dialects are supported:

Simple
    ``*`` matches zero or more characters and ``?`` matches exactly one. Nothing else
    is special, so ``*.*`` only matches names that contain a period.

Win32
    DOS/command-prompt semantics. The user pattern is first rewritten by
    `translate_win32_expression` into an internal alphabet where ``*``, ``?``, ``<``,
    ``>`` and ``"`` are all wildcards:

    * ``<`` (DOS_STAR) matches zero or more characters, but only consumes a period
      when another period follows later in the name.
    * ``>`` (DOS_QM) matches one non-period character. At a period or at the end of
      the name it matches nothing. A run of ``>`` that starts right after a ``"``
      (i.e. the extension part of the pattern) may also match nothing, so
      ``file.??t`` matches ``file.t``, ``file.at`` and ``file.txt``.
    * ``"`` (DOS_DOT) matches a period, or nothing at the end of the name.

    ``*.*`` (and ``*`` and the empty pattern) match every name.

Matching walks the name once while tracking every expression position that could
have matched the prefix seen so far, so no input can trigger exponential backtracking.
"""
from typing import FrozenSet, Iterable, Optional, Set, Tuple

from rich.markup import escape

from direnum.constants import MatchCasing, MatchType
from direnum.utils.logger import logger
from direnum.utils.system import is_case_sensitive_filesystem

DOS_STAR = "<"
DOS_QM = ">"
DOS_DOT = '"'

SIMPLE_WILDCARDS = frozenset("*?")
WIN32_WILDCARDS = frozenset('*?<>"')


def translate_win32_expression(pattern: Optional[str]) -> str:
    """Rewrites a user-supplied Win32 pattern into the internal DOS wildcard alphabet."""
    if not pattern or pattern == "*" or pattern == "*.*":
        return "*"

    translated = []
    last_index = len(pattern) - 1
    for index, char in enumerate(pattern):
        if char == ".":
            if index >= 1 and index == last_index and pattern[index - 1] == "*":
                translated[-1] = DOS_STAR  # Pattern ends in "*."
            elif index < last_index and pattern[index + 1] in "?*":
                translated.append(DOS_DOT)
            else:
                translated.append(".")
        elif char == "?":
            translated.append(DOS_QM)
        else:
            translated.append(char)
    return "".join(translated)


def _chars_equal(expression_char: str, name_char: str, ignore_case: bool) -> bool:
    if expression_char == name_char:
        return True
    return ignore_case and expression_char.casefold() == name_char.casefold()


def _collapsible_qm_positions(expression: str) -> FrozenSet[int]:
    """Positions of DOS_QMs belonging to a run that directly follows a DOS_DOT."""
    positions = set()
    after_dos_dot = False
    for index, char in enumerate(expression):
        if char == DOS_QM:
            if after_dos_dot:
                positions.add(index)
        else:
            after_dos_dot = char == DOS_DOT
    return frozenset(positions)


def _step(
    expression: str,
    states: Iterable[int],
    name_char: Optional[str],
    period_follows: bool,
    ignore_case: bool,
    extended: bool,
    collapsible: FrozenSet[int],
) -> Tuple[Set[int], Set[int]]:
    """
    Advances the match by one name character (None once the name is exhausted).

    Returns (reached, consumed): every expression position reachable from `states`
    without consuming `name_char`, and every position reached after consuming it.
    Position len(expression) means the whole expression has been matched.
    """
    end = len(expression)
    reached: Set[int] = set()
    consumed: Set[int] = set()
    pending = list(states)

    while pending:
        position = pending.pop()
        if position in reached:
            continue
        reached.add(position)
        if position == end:
            continue

        token = expression[position]
        if token == "*":
            if name_char is not None:
                consumed.add(position)
            pending.append(position + 1)
        elif extended and token == DOS_STAR:
            if name_char is not None and (name_char != "." or period_follows):
                consumed.add(position)
            pending.append(position + 1)
        elif extended and token == DOS_QM:
            if name_char is None or name_char == ".":
                pending.append(position + 1)
            else:
                consumed.add(position + 1)
                if position in collapsible:
                    pending.append(position + 1)
        elif extended and token == DOS_DOT:
            if name_char is None:
                pending.append(position + 1)
            elif name_char == ".":
                consumed.add(position + 1)
        elif name_char is None:
            continue
        elif token == "?" or _chars_equal(token, name_char, ignore_case):
            consumed.add(position + 1)

    return reached, consumed


def _match_expression(expression: str, name: str, ignore_case: bool, extended: bool) -> bool:
    if not expression or not name:
        return False

    if expression[0] == "*":
        if len(expression) == 1:
            return True
        # A single leading '*' followed by literals is an "ends with" test.
        tail = expression[1:]
        wildcards = WIN32_WILDCARDS if extended else SIMPLE_WILDCARDS
        if not any(char in wildcards for char in tail):
            if len(name) < len(tail):
                return False
            return all(
                _chars_equal(expected, actual, ignore_case)
                for expected, actual in zip(tail, name[len(name) - len(tail):])
            )

    collapsible = _collapsible_qm_positions(expression) if extended else frozenset()
    last_period = name.rfind(".")
    states: Iterable[int] = (0,)
    for index, name_char in enumerate(name):
        _, states = _step(expression, states, name_char, index < last_period, ignore_case, extended, collapsible)
        if not states:
            return False

    reached, _ = _step(expression, states, None, False, ignore_case, extended, collapsible)
    return len(expression) in reached


def matches_simple_expression(expression: str, name: str, ignore_case: bool = True) -> bool:
    """Matches `name` against an expression using only the '*' and '?' wildcards."""
    return _match_expression(expression, name, ignore_case, extended=False)


def matches_win32_expression(expression: str, name: str, ignore_case: bool = True) -> bool:
    """Matches `name` against an already translated Win32 expression (see translate_win32_expression)."""
    return _match_expression(expression, name, ignore_case, extended=True)


def resolve_ignore_case(match_casing: MatchCasing) -> bool:
    if match_casing == MatchCasing.CASE_SENSITIVE:
        return False
    if match_casing == MatchCasing.CASE_INSENSITIVE:
        return True
    return not is_case_sensitive_filesystem()


def matches_pattern(
    name: str,
    pattern: str,
    match_type: MatchType = MatchType.SIMPLE,
    match_casing: MatchCasing = MatchCasing.PLATFORM_DEFAULT,
) -> bool:
    """Tests a single file or directory name (not a path) against a user pattern."""
    ignore_case = resolve_ignore_case(match_casing)
    if match_type == MatchType.WIN32:
        expression = translate_win32_expression(pattern)
        result = matches_win32_expression(expression, name, ignore_case)
    else:
        expression = pattern
        result = matches_simple_expression(expression, name, ignore_case)
    logger.debug(
        f"Matching: '{escape(name)}' vs '{escape(pattern)}' "
        f"({match_type.name}, ignore_case={ignore_case}, expr='{escape(expression)}') -> {result}"
    )
    return result


def matches_patterns(
    name: str,
    patterns: Iterable[str],
    match_type: MatchType = MatchType.SIMPLE,
    match_casing: MatchCasing = MatchCasing.PLATFORM_DEFAULT,
) -> bool:
    for pattern in patterns:
        if matches_pattern(name, pattern, match_type, match_casing):
            return True
    return False
