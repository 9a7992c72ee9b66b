# tests/test_derived.py
import pytest

from noteai.notes.derived import count_words, reading_time


@pytest.mark.parametrize("text, expected", [
    ("hello   world", 2),
    ("  leading and trailing  ", 3),
    ("tabs\tand\nnewlines", 3),
    ("", 0),
    ("   ", 0),
    (None, 0),
])
def test_count_words(text, expected):
    assert count_words(text) == expected


def test_reading_time_rounds_up():
    assert reading_time(0) == 0
    assert reading_time(1) == 1
    assert reading_time(200) == 1
    assert reading_time(201) == 2
