import pytest

from discovery_intake.core.logging_config import mask_secret
from discovery_intake.core.settings import Settings

from conftest import TEST_TOKEN


# -------------------------
# ALLOWED_ORIGINS
# -------------------------
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("*", ["*"]),
        ("https://a.nl, https://b.nl", ["https://a.nl", "https://b.nl"]),
        ('["https://a.nl"]', ["https://a.nl"]),
        ('["https://a.nl", " https://b.nl "]', ["https://a.nl", "https://b.nl"]),
    ],
)
def test_allowed_origins_parsing(raw, expected):
    settings = Settings(ALLOWED_ORIGINS=raw, _env_file=None)
    assert settings.allowed_origins == expected


def test_form_part_limit_allows_phone_photos():
    assert Settings(_env_file=None).FORM_MAX_PART_BYTES > 1024 * 1024


# -------------------------
# mask_secret
# -------------------------
def test_mask_secret_long_token():
    masked = mask_secret(TEST_TOKEN)

    assert masked == {
        "has_key": True,
        "key_prefix": TEST_TOKEN[:7],
        "key_suffix": TEST_TOKEN[-4:],
        "key_length": len(TEST_TOKEN),
    }


@pytest.mark.parametrize("secret", ["abc", "pat-na1", "pat-na1-12345678"])
def test_mask_secret_short_token_reveals_nothing(secret):
    masked = mask_secret(secret)

    assert masked["has_key"] is True
    assert masked["key_prefix"] is None
    assert masked["key_suffix"] is None
    assert masked["key_length"] == len(secret)


@pytest.mark.parametrize("secret", [None, ""])
def test_mask_secret_missing(secret):
    assert mask_secret(secret)["has_key"] is False
