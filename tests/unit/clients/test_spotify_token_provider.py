import threading
import time

import pytest
import requests

from pinsound.errors import ConfigurationError, UpstreamError
from pinsound.infrastructure.spotify import SPOTIFY_TOKEN_URL, SpotifyTokenProvider
from tests.support.stubs import FakeResponse, FakeSession


class Clock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def _token(value="tok-1", expires_in=3600):
    return FakeResponse(200, {"access_token": value, "token_type": "Bearer", "expires_in": expires_in})


@pytest.mark.unit
def test_exchanges_client_credentials():
    session = FakeSession([_token()])
    provider = SpotifyTokenProvider("cid", "csecret", session=session, timeout=5)

    assert provider.get_token() == "tok-1"
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == SPOTIFY_TOKEN_URL
    assert call["data"] == {"grant_type": "client_credentials"}
    assert call["auth"] == ("cid", "csecret")
    assert call["timeout"] == 5


@pytest.mark.unit
def test_token_is_reused_until_it_expires():
    clock = Clock()
    session = FakeSession([_token("tok-1", expires_in=60), _token("tok-2")])
    provider = SpotifyTokenProvider("cid", "csecret", session=session, clock=clock)

    assert provider.get_token() == "tok-1"
    clock.now += 59
    assert provider.get_token() == "tok-1"
    assert len(session.calls) == 1

    clock.now += 1
    assert provider.get_token() == "tok-2"
    assert len(session.calls) == 2


@pytest.mark.unit
def test_invalidate_forces_a_new_exchange():
    session = FakeSession([_token("tok-1"), _token("tok-2")])
    provider = SpotifyTokenProvider("cid", "csecret", session=session)

    assert provider.get_token() == "tok-1"
    provider.invalidate()
    assert provider.get_token() == "tok-2"


@pytest.mark.unit
def test_missing_expires_in_defaults_to_an_hour():
    clock = Clock()
    session = FakeSession([FakeResponse(200, {"access_token": "tok"})])
    provider = SpotifyTokenProvider("cid", "csecret", session=session, clock=clock)

    provider.get_token()
    clock.now += 3599
    assert provider.get_token() == "tok"
    assert len(session.calls) == 1


@pytest.mark.unit
@pytest.mark.parametrize("client_id,client_secret", [(None, "s"), ("c", None), ("", "")])
def test_missing_credentials_raise_configuration_error(client_id, client_secret):
    session = FakeSession()
    provider = SpotifyTokenProvider(client_id, client_secret, session=session)

    with pytest.raises(ConfigurationError):
        provider.get_token()
    assert session.calls == []


@pytest.mark.unit
def test_rejected_exchange_carries_vendor_body():
    body = {"error": "invalid_client", "error_description": "Invalid client"}
    provider = SpotifyTokenProvider("cid", "bad", session=FakeSession([FakeResponse(400, body)]))

    with pytest.raises(UpstreamError) as info:
        provider.get_token()

    assert info.value.service == "spotify"
    assert info.value.status_code == 400
    assert info.value.payload == body


@pytest.mark.unit
def test_network_error_is_wrapped():
    session = FakeSession([requests.ConnectionError("dns failure")])
    provider = SpotifyTokenProvider("cid", "csecret", session=session)

    with pytest.raises(UpstreamError, match="dns failure"):
        provider.get_token()


@pytest.mark.unit
def test_failed_exchange_does_not_poison_the_slot():
    session = FakeSession([FakeResponse(503, None, "unavailable"), _token("tok-ok")])
    provider = SpotifyTokenProvider("cid", "csecret", session=session)

    with pytest.raises(UpstreamError):
        provider.get_token()
    assert provider.get_token() == "tok-ok"


class SlowTokenSession(FakeSession):
    """Holds every exchange open long enough for other threads to pile up."""

    def __init__(self, delay=0.05):
        super().__init__()
        self.delay = delay

    def post(self, url, **kwargs):
        self.calls.append({"method": "POST", "url": url, **kwargs})
        time.sleep(self.delay)
        return _token(f"tok-{len(self.calls)}")


@pytest.mark.unit
def test_concurrent_callers_share_one_exchange():
    session = SlowTokenSession()
    provider = SpotifyTokenProvider("cid", "csecret", session=session)
    start = threading.Barrier(8)
    tokens = []

    def worker():
        start.wait()
        tokens.append(provider.get_token())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert len(session.calls) == 1
    assert tokens == ["tok-1"] * 8
