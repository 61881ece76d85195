import pytest

from httptoolkit.core.errors import SlugError
from httptoolkit.services.text_service import RANDOM_STRING_SOURCE, create_slug, random_string


@pytest.mark.parametrize("length", [0, 1, 10, 64])
def test_random_string_length_and_alphabet(length):
    value = random_string(length)
    assert len(value) == length
    assert set(value) <= set(RANDOM_STRING_SOURCE)


def test_random_string_source_alphabet():
    assert len(RANDOM_STRING_SOURCE) == 26 * 2 + 10 + 5
    assert RANDOM_STRING_SOURCE.endswith("~!@#$")


def test_random_string_negative_length_is_empty():
    assert random_string(-3) == ""


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("now is the time", "now-is-the-time"),
        (
            "Now is the time for all GOOD people! + fish & such^123",
            "now-is-the-time-for-all-good-people-fish-such-123",
        ),
        ("Good Morning おはようございます", "good-morning"),
        ("  --Already-Slugged--  ", "already-slugged"),
    ],
)
def test_create_slug(text, expected):
    assert create_slug(text) == expected


def test_create_slug_rejects_empty_string():
    with pytest.raises(SlugError, match="empty string not permitted"):
        create_slug("")


@pytest.mark.parametrize("text", ["おはようございます", "!!! ---"])
def test_create_slug_rejects_zero_length_result(text):
    with pytest.raises(SlugError, match="zero length"):
        create_slug(text)
