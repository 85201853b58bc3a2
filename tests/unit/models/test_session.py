"""Unit tests for session identity."""

from multisend.models import NATIVE_ASSET_ID, SessionParams


def _params(**overrides) -> SessionParams:
    values = {
        "sender": "0x1111111111111111111111111111111111111111",
        "contract": "0x2222222222222222222222222222222222222222",
        "asset": NATIVE_ASSET_ID,
        "input_source": "/data/recipients.csv",
    }
    values.update(overrides)
    return SessionParams(**values)


def test_session_id_is_deterministic():
    """Identical parameters give the same session id."""
    assert _params().session_id == _params().session_id


def test_session_id_is_sha256_hex():
    """Session id is a 64-character hex digest."""
    session_id = _params().session_id
    assert len(session_id) == 64
    int(session_id, 16)


def test_session_id_depends_on_every_parameter():
    """Changing any parameter starts a different session."""
    base = _params().session_id
    assert _params(sender="0x3333333333333333333333333333333333333333").session_id != base
    assert _params(contract="0x4444444444444444444444444444444444444444").session_id != base
    assert _params(asset="0x5555555555555555555555555555555555555555").session_id != base
    assert _params(input_source="/data/other.csv").session_id != base
