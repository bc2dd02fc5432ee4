import pytest

from key_sequence import parse_key_sequence


@pytest.mark.parametrize(
    "text,expected",
    (
        ("w, s", ["w", "s"]),
        ("", []),
        ("   ", []),
        (" , ,", []),
        (" a ,, b ", ["a", "b"]),
        ("space, Enter", ["space", "Enter"]),
        ("w", ["w"]),
        ("w,", ["w"]),
    ),
)
def test_parse_key_sequence(text, expected):
    assert parse_key_sequence(text) == expected


def test_parse_none_is_empty():
    assert parse_key_sequence(None) == []
