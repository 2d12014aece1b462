import pytest

from core.utils import aspect_ratio, format_size, gcd


@pytest.mark.parametrize(
    "a, b, expected",
    [(1920, 1080, 120), (1080, 1920, 120), (7, 0, 7), (0, 7, 7), (13, 7, 1)],
)
def test_gcd(a, b, expected):
    assert gcd(a, b) == expected


@pytest.mark.parametrize(
    "width, height, expected",
    [
        (1920, 1080, "16:9"),
        (854, 480, "427:240"),
        (640, 640, "1:1"),
        (0, 1080, "N/A"),
        (1920, 0, "N/A"),
        (None, 1080, "N/A"),
    ],
)
def test_aspect_ratio(width, height, expected):
    assert aspect_ratio(width, height) == expected


def test_format_size_exact():
    assert format_size(1048576) == "1.00 MB"


def test_format_size_approximate():
    assert format_size(None, 1572864) == "~1.50 MB"


def test_exact_size_wins_over_estimate():
    assert format_size(2097152, 1572864) == "2.00 MB"


def test_format_size_missing():
    assert format_size(None, None) == "N/A"
    assert format_size(0, 0) == "N/A"
