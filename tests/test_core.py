from dataclasses import MISSING, fields
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from blog_api.core.config import Settings, settings
from blog_api.core.exceptions import InvalidToken
from blog_api.core.security import create_access_token, decode_access_token
from blog_api.core.time import CN_TZ, one_month_ago


@pytest.mark.parametrize(
    "now, expected",
    [
        (datetime(2026, 10, 19, 15, 30, tzinfo=CN_TZ), datetime(2026, 9, 19, tzinfo=CN_TZ)),
        (datetime(2026, 1, 15, 8, 0, tzinfo=CN_TZ), datetime(2025, 12, 15, tzinfo=CN_TZ)),
        (datetime(2026, 3, 31, 23, 59, tzinfo=CN_TZ), datetime(2026, 2, 28, tzinfo=CN_TZ)),
        (datetime(2028, 3, 30, 12, 0, tzinfo=CN_TZ), datetime(2028, 2, 29, tzinfo=CN_TZ)),
    ],
)
def test_one_month_ago_is_calendar_month_at_midnight(now, expected):
    assert one_month_ago(now) == expected


def test_token_round_trip():
    user = decode_access_token(create_access_token("u-42", is_admin=True))
    assert user.uid == "u-42"
    assert user.is_admin is True


def test_tampered_token_is_rejected():
    header, _, signature = create_access_token("u-1").split(".")
    forged = create_access_token("u-1", is_admin=True).split(".")[1]
    with pytest.raises(InvalidToken):
        decode_access_token(f"{header}.{forged}.{signature}")


def test_expired_and_malformed_tokens():
    with pytest.raises(InvalidToken):
        decode_access_token(create_access_token("u-1", expires_in=-10))
    with pytest.raises(InvalidToken):
        decode_access_token("not-a-token")
    with pytest.raises(InvalidToken):
        decode_access_token("a.b.c")


def test_token_signed_with_other_key_or_without_subject_is_rejected():
    exp = datetime.now(timezone.utc) + timedelta(minutes=5)
    foreign = jwt.encode({"sub": "u-1", "exp": exp}, "another-secret-key-of-sufficient-length", algorithm="HS256")
    with pytest.raises(InvalidToken):
        decode_access_token(foreign)

    no_subject = jwt.encode({"is_admin": True, "exp": exp}, settings.secret_key, algorithm="HS256")
    with pytest.raises(InvalidToken):
        decode_access_token(no_subject)


def test_settings_defaults_are_all_read_at_import():
    assert all(f.default_factory is MISSING for f in fields(Settings))
    assert Settings().database_url == settings.database_url == "sqlite://"
