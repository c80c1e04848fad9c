from clearr.core.jwt import create_access_token, create_refresh_token, decode_token


def test_access_token_round_trip():
    token = create_access_token(42, "+15551234567")
    payload = decode_token(token)
    assert payload["sub"] == "42"
    assert payload["phone_number"] == "+15551234567"
    assert payload["type"] == "access"


def test_refresh_token_only_decodes_as_refresh():
    token = create_refresh_token(42, "+15551234567")
    assert decode_token(token, refresh=True)["type"] == "refresh"
    assert decode_token(token) is None


def test_access_token_is_not_a_refresh_token():
    token = create_access_token(42, "+15551234567")
    assert decode_token(token, refresh=True) is None


def test_expired_token_is_rejected():
    token = create_access_token(42, "+15551234567", expires_days=-1)
    assert decode_token(token) is None


def test_garbage_is_rejected():
    assert decode_token("not-a-jwt") is None
