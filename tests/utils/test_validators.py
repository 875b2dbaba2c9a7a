import pytest

from clubhouse.core.exceptions import ValidationError
from clubhouse.utils.validators import (
    alias_key,
    clean_alias,
    clean_optional_text,
    validate_accent_color,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Abe", "Abe"),
        ("  Rook  ", "Rook"),
        ("Sir   Lance\tLot", "Sir Lance Lot"),
        ("dice_goblin-42", "dice_goblin-42"),
        ("x" * 24, "x" * 24),
    ],
)
def test_clean_alias_accepts(raw, expected):
    assert clean_alias(raw) == expected


@pytest.mark.parametrize("raw", ["Ab", "", "   ", "x" * 25, "Rook!", "Zoë", "a.b.c"])
def test_clean_alias_rejects(raw):
    with pytest.raises(ValidationError):
        clean_alias(raw)


def test_alias_key_ignores_case():
    assert alias_key("Rook") == alias_key(" rook ") == "rook"


def test_accent_color():
    assert validate_accent_color("#7C3AED") == "#7c3aed"
    with pytest.raises(ValidationError):
        validate_accent_color("purple")
    with pytest.raises(ValidationError):
        validate_accent_color("#7c3ae")


def test_clean_optional_text():
    assert clean_optional_text(None) is None
    assert clean_optional_text("   ") is None
    assert clean_optional_text(" he/him ") == "he/him"
