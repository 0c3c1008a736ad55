import pytest
from pydantic import ValidationError

from telecare.config import Settings


def test_display_timezone_accepts_iana_names():
    assert Settings(DISPLAY_TIMEZONE="Africa/Nairobi").DISPLAY_TIMEZONE == "Africa/Nairobi"
    assert Settings(DISPLAY_TIMEZONE="utc").DISPLAY_TIMEZONE == "utc"


def test_display_timezone_rejects_unknown_zone():
    with pytest.raises(ValidationError):
        Settings(DISPLAY_TIMEZONE="Mars/Olympus")


def test_allowed_origins_list_splits_csv():
    s = Settings(ALLOWED_ORIGINS="https://a.example, https://b.example")
    assert s.allowed_origins_list == ["https://a.example", "https://b.example"]
