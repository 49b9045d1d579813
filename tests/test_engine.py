import asyncio
import logging

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from pemline.codec import from_one_line, parse_pem_blocks
from pemline.engine import AlgorithmDescriptor, CryptographyEngine
from pemline.session import Session
from pemline.testing_utils import FakeClipboard, ManualScheduler


OAEP = padding.OAEP(
    mgf=padding.MGF1(algorithm=hashes.SHA256()),
    algorithm=hashes.SHA256(),
    label=None,
)


@pytest.fixture(scope="module")
def generated_session():
    """One real 2048-bit generation shared by the tests in this module."""
    session = Session(
        engine=CryptographyEngine(),
        clipboard=FakeClipboard(),
        scheduler=ManualScheduler(),
    )
    session.state.select_modulus_size(2048)
    result = asyncio.run(session.generate())
    assert result is not None, session.state.error_text
    yield session
    session.close()


def test_cryptography_engine_is_available():
    assert CryptographyEngine().is_available() is True


def test_public_key_one_line_shape(generated_session):
    public = generated_session.state.public_one_line

    assert public.startswith("-----BEGIN PUBLIC KEY-----\\n")
    assert public.endswith("\\n-----END PUBLIC KEY-----")

    blocks = parse_pem_blocks(from_one_line(public))
    assert [b.label for b in blocks] == ["PUBLIC KEY"]


def test_every_pem_body_line_is_at_most_64_chars(generated_session):
    for one_line in (
        generated_session.state.public_one_line,
        generated_session.state.private_one_line,
    ):
        body = from_one_line(one_line).split("\n")[1:-1]
        assert all(len(line) == 64 for line in body[:-1])
        assert 0 < len(body[-1]) <= 64


def test_generated_keys_load_and_match(generated_session):
    state = generated_session.state
    public_key = serialization.load_pem_public_key(
        from_one_line(state.public_one_line).encode("ascii")
    )
    private_key = serialization.load_pem_private_key(
        from_one_line(state.private_one_line).encode("ascii"), password=None
    )

    assert isinstance(public_key, rsa.RSAPublicKey)
    assert public_key.key_size == 2048
    assert public_key.public_numbers().e == 65537
    assert private_key.public_key().public_numbers() == public_key.public_numbers()

    ciphertext = public_key.encrypt(b"round trip", OAEP)
    assert private_key.decrypt(ciphertext, OAEP) == b"round trip"


def test_combined_export_parses_as_env_lines(generated_session):
    state = generated_session.state
    lines = state.combined_export.split("\n")

    assert lines == [
        f"PUBLIC_KEY={state.public_one_line}",
        "",
        f"PRIVATE_KEY={state.private_one_line}",
    ]


def test_export_rejects_unknown_format():
    engine = CryptographyEngine()
    with pytest.raises(ValueError):
        asyncio.run(engine.export_key("jwk", object()))


def test_engine_rejects_unsupported_hash():
    engine = CryptographyEngine()
    with pytest.raises(ValueError):
        asyncio.run(engine.generate_key_pair(AlgorithmDescriptor(modulus_length=2048, hash="SHA-1")))


def test_backend_check_failure_is_logged(monkeypatch, caplog):
    def broken_backend():
        raise RuntimeError("no OpenSSL")

    monkeypatch.setattr("pemline.engine.default_backend", broken_backend)

    with caplog.at_level(logging.DEBUG, logger="pemline.engine"):
        assert CryptographyEngine().is_available() is False

    [record] = caplog.records
    assert "no OpenSSL" in str(record.exc_info[1])
