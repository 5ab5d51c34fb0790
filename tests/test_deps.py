import pytest

from astrosocial.api.deps import get_language


@pytest.mark.parametrize("header, expected", [
    (None, "en"),
    ("", "en"),
    ("fr", "fr"),
    ("FR", "fr"),
    ("fr-CA", "fr"),
    ("en-US,en;q=0.9", "en"),
    ("de-DE,fr;q=0.8,en;q=0.5", "fr"),
    ("en;q=0.3,fr;q=0.7", "fr"),
    ("de, it", "en"),
    ("*", "en"),
    ("fr;q=0, en;q=0.1", "en"),
    ("fr_FR", "fr"),
])
def test_get_language(header, expected):
    assert get_language(header) == expected
