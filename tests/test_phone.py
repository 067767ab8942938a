import pytest

from app.utils import normalize_phone_number, to_chat_id


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("0771461925", "94771461925"),
        ("077 146 1925", "94771461925"),
        ("+94 77 146 1925", "94771461925"),
        ("(077) 146-1925", "94771461925"),
        ("771461925", "94771461925"),
        ("94771461925", "94771461925"),
    ],
)
def test_normalize_sri_lankan_numbers(raw: str, expected: str) -> None:
    assert normalize_phone_number(raw) == expected


def test_normalize_other_country_code() -> None:
    assert normalize_phone_number("0612345678", country_code="33") == "33612345678"


def test_normalize_rejects_empty() -> None:
    with pytest.raises(ValueError):
        normalize_phone_number(" - ")


def test_chat_id_suffix() -> None:
    assert to_chat_id("94771461925") == "94771461925@c.us"
    assert to_chat_id("94771461925@c.us") == "94771461925@c.us"
