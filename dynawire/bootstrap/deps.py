import json
from functools import lru_cache

from pydantic import ValidationError

from dynawire.bootstrap.config.settings import DynawireConfig
from dynawire.core.codec.decoder import Decoder
from dynawire.core.codec.encoder import Encoder
from dynawire.core.codec.registry import CapabilityRegistry, default_registry
from dynawire.core.facade import DynamoClient
from dynawire.core.requests.builder import RequestBuilder
from dynawire.infra.httpx_transport import HttpxTransport


@lru_cache
def get_config() -> DynawireConfig:
    try:
        return DynawireConfig()
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(map(str, err['loc']))}: {err['msg']}")
        raise SystemExit("\n".join(msg))


def get_registry() -> CapabilityRegistry:
    return default_registry


@lru_cache
def get_encoder() -> Encoder:
    return Encoder(registry=get_registry(), options=get_config().to_options())


@lru_cache
def get_decoder() -> Decoder:
    return Decoder(registry=get_registry(), options=get_config().to_options())


@lru_cache
def get_builder() -> RequestBuilder:
    return RequestBuilder(get_encoder())


def get_client() -> DynamoClient:
    """Build a client with its own transport; the caller owns and closes it."""
    config = get_config()
    transport = HttpxTransport(
        endpoint=config.service.endpoint,
        timeout=config.service.timeout,
    )
    return DynamoClient(
        builder=get_builder(),
        transport=transport,
        decoder=get_decoder(),
    )
