import pytest

from dynawire.core.codec.decoder import Decoder
from dynawire.core.codec.encoder import Encoder
from dynawire.core.facade import DynamoClient
from dynawire.core.models.options import CodecOptions
from dynawire.core.requests.builder import RequestBuilder
from tests.fake.fake_transport import FakeTransport
from tests.helpers import clear_deps_cache
from tests.utils import registry as test_registry


@pytest.fixture
def registry():
    return test_registry


@pytest.fixture
def encoder(registry):
    return Encoder(registry=registry)


@pytest.fixture
def decoder(registry):
    return Decoder(registry=registry)


@pytest.fixture
def list_decoder(registry):
    return Decoder(registry=registry, options=CodecOptions(decode_sets_as_sets=False))


@pytest.fixture
def builder(encoder):
    return RequestBuilder(encoder)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(builder, transport, decoder):
    return DynamoClient(builder=builder, transport=transport, decoder=decoder)


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    """Isolate configuration from the environment and the working directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DYNAWIRECONFIG", raising=False)
    monkeypatch.delenv("DYNAWIRE_CODEC__DECODE_SETS_AS_SETS", raising=False)
    monkeypatch.delenv("DYNAWIRE_CODEC__STRIP_EMPTY_STRINGS", raising=False)
    monkeypatch.delenv("DYNAWIRE_SERVICE__ENDPOINT", raising=False)
    monkeypatch.delenv("DYNAWIRE_SERVICE__TIMEOUT", raising=False)
    clear_deps_cache()
    yield tmp_path
    clear_deps_cache()
