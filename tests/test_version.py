from jetpages.version import get_version


def test_version_value():
    assert get_version() == "1.0.1"


def test_version_has_three_numeric_parts():
    parts = get_version().split(".")
    assert len(parts) == 3
    assert all(part.isdigit() for part in parts)