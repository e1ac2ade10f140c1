from collections import namedtuple

Symbol = namedtuple("Symbol", ["code", "name"])

# ── Throw catalog ─────────────────────────────────────────────────────────────
# Order matters: it is the order patterns are generated in, so it decides
# which rotation of a pattern is shown.

THROW_SYMBOLS = [
    Symbol("S",  "Single"),
    Symbol("D",  "Double"),
    Symbol("L",  "Lazy"),
    Symbol("F",  "Flat"),
    Symbol("B",  "Behind the back"),
    Symbol("P",  "Penguin"),
    Symbol("O",  "Over the top"),
    Symbol("Od", "Over the top double"),
    Symbol("Us", "Under same leg"),
    Symbol("Uo", "Under opposite leg"),
]

_NAMES = {s.code: s.name for s in THROW_SYMBOLS}


def symbol_codes():
    return [s.code for s in THROW_SYMBOLS]


def ordered_selection(selected):
    """Return the selected codes in catalog order, dropping unknown codes."""
    wanted = set(selected or ())
    return [s.code for s in THROW_SYMBOLS if s.code in wanted]


def display_name(code: str) -> str:
    return _NAMES.get(code, code)
