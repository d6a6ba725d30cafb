"""Shell-glob matching for host names, aliases and template keys.

Every lookup in the resolver goes through `matches()`, so host keys,
aliases and templates follow exactly the same rules:

    *       any run of characters (including none)
    ?       exactly one character
    [abc]   one character from the class (ranges like [a-z] allowed)
    [!abc]  one character not in the class ([^abc] is accepted too)
    \\x     the literal character x

Patterns apply to whole names. Malformed patterns raise PatternError
instead of silently matching nothing.
"""
import re
from functools import lru_cache

GLOB_CHARS = frozenset("*?[")


class PatternError(ValueError):
    """Malformed glob pattern."""
    pass


def is_pattern(text: str) -> bool:
    """Check whether a name contains glob metacharacters."""
    return any(c in GLOB_CHARS for c in text)


def matches(pattern: str, candidate: str) -> bool:
    """
    Check whether `candidate` is matched by the glob `pattern`.

    Raises:
        PatternError: If the pattern is malformed
    """
    return _compile(pattern).match(candidate) is not None


@lru_cache(maxsize=512)
def _compile(pattern: str) -> re.Pattern:
    try:
        return re.compile(r"(?s:" + _translate(pattern) + r")\Z")
    except re.error as e:
        raise PatternError(f"invalid pattern {pattern!r}: {e}") from e


def _translate(pattern: str) -> str:
    """Translate a glob into a regular expression body."""
    parts = []
    i = 0
    n = len(pattern)

    while i < n:
        c = pattern[i]
        if c == "*":
            # Collapse runs of stars
            while i + 1 < n and pattern[i + 1] == "*":
                i += 1
            parts.append(".*")
        elif c == "?":
            parts.append(".")
        elif c == "\\":
            if i + 1 >= n:
                raise PatternError(f"trailing backslash in pattern {pattern!r}")
            i += 1
            parts.append(re.escape(pattern[i]))
        elif c == "[":
            end = _class_end(pattern, i)
            parts.append(_translate_class(pattern[i + 1:end], pattern))
            i = end
        else:
            parts.append(re.escape(c))
        i += 1

    return "".join(parts)


def _class_end(pattern: str, start: int) -> int:
    """Return the index of the ']' closing the class opened at `start`."""
    j = start + 1
    n = len(pattern)
    if j < n and pattern[j] in "!^":
        j += 1
    # A leading ']' is a literal member of the class
    if j < n and pattern[j] == "]":
        j += 1
    while j < n and pattern[j] != "]":
        if pattern[j] == "\\":
            j += 1
        j += 1
    if j >= n:
        raise PatternError(f"unterminated character class in pattern {pattern!r}")
    return j


def _translate_class(body: str, pattern: str) -> str:
    negate = False
    if body and body[0] in "!^":
        negate = True
        body = body[1:]

    members = []
    # Last single character, the only valid start of a range
    previous = None
    i = 0
    while i < len(body):
        c = body[i]
        if c == "\\":
            i += 1
            c = body[i]
        elif c == "-" and previous is not None and i + 1 < len(body):
            i += 1
            high = body[i]
            if high == "\\":
                i += 1
                high = body[i]
            if previous > high:
                raise PatternError(f"bad character range {previous}-{high} in pattern {pattern!r}")
            members.append("-" + re.escape(high))
            previous = None
            i += 1
            continue
        members.append(re.escape(c))
        previous = c
        i += 1

    if not members:
        raise PatternError(f"empty character class in pattern {pattern!r}")

    return "[" + ("^" if negate else "") + "".join(members) + "]"
