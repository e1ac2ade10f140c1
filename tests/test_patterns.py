import pytest

from catalog import THROW_SYMBOLS, ordered_selection, display_name, symbol_codes
from patterns import (
    MAX_REPEAT,
    extract_base,
    generate_patterns,
    is_repeating,
    iter_necklaces,
    related_patterns,
    split_pattern,
)


# ── Catalog ───────────────────────────────────────────────────────────────────

def test_catalog_codes_unique_and_non_empty():
    codes = symbol_codes()
    assert len(codes) == len(set(codes)) == len(THROW_SYMBOLS)
    assert all(codes)


def test_ordered_selection_follows_catalog_order():
    assert ordered_selection({"Us", "S", "zz", "D"}) == ["S", "D", "Us"]
    assert ordered_selection(None) == []


def test_display_name():
    assert display_name("Od") == "Over the top double"
    assert display_name("?") == "?"


# ── Enumeration ───────────────────────────────────────────────────────────────

def test_two_symbols_length_two():
    assert generate_patterns(["A", "B"], 2) == ["AA", "AB", "BB"]


@pytest.mark.parametrize("symbols, length", [([], 3), (["A"], 0), (["A"], -2), ([""], 2)])
def test_empty_inputs_give_no_patterns(symbols, length):
    assert generate_patterns(symbols, length) == []


def test_generation_is_deterministic():
    first = generate_patterns(["S", "D", "L"], 4)
    assert generate_patterns(["S", "D", "L"], 4) == first


@pytest.mark.parametrize("k, n, expected", [(2, 4, 6), (3, 3, 11), (2, 6, 14), (3, 1, 3)])
def test_necklace_counts(k, n, expected):
    symbols = ["S", "D", "L"][:k]
    assert len(generate_patterns(symbols, n)) == expected


@pytest.mark.parametrize("k, n", [(1, 5), (2, 5), (3, 4), (4, 3)])
def test_cardinality_bounds(k, n):
    symbols = symbol_codes()[:k]
    count = len(generate_patterns(symbols, n))
    assert k ** n / n <= count <= k ** n


def test_no_two_outputs_are_rotations():
    seen = set()
    for tokens in iter_necklaces(["S", "D", "L"], 4):
        rotations = {tokens[i:] + tokens[:i] for i in range(len(tokens))}
        assert not rotations & seen
        seen.add(tokens)


def test_first_generated_rotation_is_kept():
    # With B before A, "BA" is generated before "AB" and represents the class.
    assert generate_patterns(["B", "A"], 2) == ["AA", "BA", "BB"]


def test_duplicate_symbols_collapse():
    assert generate_patterns(["A", "B", "A"], 2) == ["AA", "AB", "BB"]


def test_multi_character_codes_rotate_as_tokens():
    assert generate_patterns(["O", "Od"], 2) == ["OO", "OOd", "OdOd"]
    assert len(generate_patterns(["O", "Od"], 3)) == 4


# ── Tokens ────────────────────────────────────────────────────────────────────

def test_split_pattern_prefers_catalog_codes():
    assert split_pattern("OdOUs") == ("Od", "O", "Us")
    assert split_pattern("SDL") == ("S", "D", "L")


def test_split_pattern_falls_back_to_characters():
    assert split_pattern("xyz") == ("x", "y", "z")


def test_split_pattern_keeps_token_sequences():
    assert split_pattern(["Od", "O"]) == ("Od", "O")


def test_split_pattern_with_custom_symbols():
    assert split_pattern("abab", symbols=["ab"]) == ("ab", "ab")


# ── Bases ─────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("pattern, base", [
    ("DDD", "D"),
    ("OdOdOd", "Od"),
    ("SDL", "SDL"),
    ("S", "S"),
    ("SDSDSD", "SD"),
    ("SDSDS", "SDSDS"),
    ("UsOUsO", "UsO"),
])
def test_extract_base(pattern, base):
    assert extract_base(pattern) == base


def test_extract_base_on_tokens():
    assert extract_base(("Od", "Od")) == ("Od",)


def test_is_repeating():
    assert is_repeating("DD")
    assert is_repeating("OdOd")
    assert not is_repeating("D")
    assert not is_repeating("SDL")
    assert not is_repeating("OdO")


def test_related_patterns_family():
    assert related_patterns("DD") == ["D", "DD", "DDD", "DDDD", "DDDDD", "DDDDDD"]


def test_related_patterns_of_aperiodic_pattern():
    family = related_patterns("SDL")
    assert len(family) == MAX_REPEAT
    assert family[0] == "SDL"
    assert family[2] == "SDLSDLSDL"


def test_related_patterns_multi_character_base():
    assert related_patterns("UsUs")[:3] == ["Us", "UsUs", "UsUsUs"]


def test_split_pattern_handles_very_long_keys():
    tokens = split_pattern("OdS" * 2000)
    assert len(tokens) == 4000
    assert tokens[:2] == ("Od", "S")
    assert extract_base("OdS" * 2000) == "OdS"
