"""
Pattern enumeration and base extraction.

A pattern is a sequence of throw codes. Progress is keyed by the
concatenated string ("SDL", "OdOdS"), but every operation here works on
the token sequence so multi-character codes such as "Od" are never cut in
half by a rotation or a repeat.
"""
from itertools import product
from functools import lru_cache

from catalog import symbol_codes

MAX_REPEAT = 6  # longest family member is the base repeated this many times


# ── Tokens ────────────────────────────────────────────────────────────────────

def split_pattern(pattern, symbols=None):
    """Split a pattern key into throw codes.

    Tuples and lists are taken to be tokens already. Strings are matched
    against ``symbols`` (the catalog codes by default), longest code first.
    A string that no combination of codes spells falls back to one token
    per character.
    """
    if isinstance(pattern, (tuple, list)):
        return tuple(pattern)
    codes = tuple(sorted(set(symbols or symbol_codes()), key=len, reverse=True))
    tokens = _split(pattern, codes)
    return tokens if tokens is not None else tuple(pattern)


@lru_cache(maxsize=4096)
def _split(text, codes):
    # Walk back from the end so each position knows whether its tail splits;
    # chosen[i] is the code used at position i, None when no split exists.
    n = len(text)
    chosen = [None] * (n + 1)
    chosen[n] = ""
    for i in range(n - 1, -1, -1):
        for code in codes:
            if code and text.startswith(code, i) and chosen[i + len(code)] is not None:
                chosen[i] = code
                break
    if chosen[0] is None:
        return None
    tokens = []
    i = 0
    while i < n:
        tokens.append(chosen[i])
        i += len(chosen[i])
    return tuple(tokens)


def _join(tokens, like):
    # Hand results back in the form the caller used.
    return "".join(tokens) if isinstance(like, str) else tuple(tokens)


# ── Enumeration ───────────────────────────────────────────────────────────────

def iter_necklaces(symbols, length):
    """Yield one token tuple per rotation class, in generation order.

    Candidates come out of the nested loop over ``symbols`` in the order
    given; the first rotation of each class to appear is the one kept.
    """
    symbols = list(dict.fromkeys(s for s in symbols or () if s))
    if not symbols or length <= 0:
        return
    accepted = set()
    for candidate in product(symbols, repeat=length):
        if any(candidate[i:] + candidate[:i] in accepted for i in range(length)):
            continue
        accepted.add(candidate)
        yield candidate


def generate_patterns(symbols, length):
    """All rotation-distinct patterns of ``length`` throws, sorted by key."""
    return sorted({"".join(t) for t in iter_necklaces(symbols, length)})


# ── Bases and families ────────────────────────────────────────────────────────

def _base_tokens(tokens):
    n = len(tokens)
    for d in range(1, n // 2 + 1):
        if n % d == 0 and tokens[:d] * (n // d) == tokens:
            return tokens[:d]
    return tokens


def extract_base(pattern, symbols=None):
    """Shortest unit the pattern is a whole repetition of ("DDD" -> "D")."""
    return _join(_base_tokens(split_pattern(pattern, symbols)), pattern)


def is_repeating(pattern, symbols=None) -> bool:
    tokens = split_pattern(pattern, symbols)
    return len(_base_tokens(tokens)) < len(tokens)


def related_patterns(pattern, symbols=None):
    """The base of ``pattern`` repeated 1..MAX_REPEAT times, shortest first."""
    base = _base_tokens(split_pattern(pattern, symbols))
    return [_join(base * k, pattern) for k in range(1, MAX_REPEAT + 1)]
