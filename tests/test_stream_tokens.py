from urllib.parse import parse_qs, urlsplit

from tiersync.services.stream_tokens import check_stream_token, sign, sign_stream_url

NOW = 1_700_000_000


def test_valid_token_passes():
    exp = NOW + 600
    assert check_stream_token("https://a/b.mp3", exp, sign("https://a/b.mp3", exp, "s"), secret="s", max_minutes=70, now=NOW) is None


def test_window_allows_thirty_seconds_slack():
    exp = NOW + 70 * 60 + 30
    assert check_stream_token("u", exp, sign("u", exp, "s"), secret="s", max_minutes=70, now=NOW) is None
    exp += 1
    assert check_stream_token("u", exp, sign("u", exp, "s"), secret="s", max_minutes=70, now=NOW) == "window"


def test_signature_binds_url_and_expiry():
    exp = NOW + 60
    sig = sign("u", exp, "s")
    assert check_stream_token("u2", exp, sig, secret="s", max_minutes=70, now=NOW) == "sig"
    assert check_stream_token("u", exp + 1, sig, secret="s", max_minutes=70, now=NOW) == "sig"


def test_missing_signature_is_rejected():
    assert check_stream_token("u", NOW + 60, "", secret="s", max_minutes=70, now=NOW) == "params"


def test_sign_stream_url_round_trips_through_check():
    link = sign_stream_url("https://relay.test/api/v1/stream", "https://cdn/x.mp3?v=1", secret="s", ttl_minutes=5, now=NOW)
    query = parse_qs(urlsplit(link).query)

    exp = int(query["exp"][0])
    assert exp == NOW + 300
    assert query["u"] == ["https://cdn/x.mp3?v=1"]
    assert check_stream_token(query["u"][0], exp, query["sig"][0], secret="s", max_minutes=70, now=NOW) is None
