from typing import Optional

import zmq.asyncio

from .configs import BridgeSettings, DecoderKind
from .core import BridgeContext, RecordingStateMachine
from .decoding import BinaryMapDecoder, FlatArrayDecoder, NestedGazeDecoder, PayloadDecoder
from .transport import RemoteEndpoint, ZMQReplier, ZMQRequester, ZMQSubscriber

DECODERS: dict[DecoderKind, type[PayloadDecoder]] = {
    DecoderKind.FLAT_ARRAY: FlatArrayDecoder,
    DecoderKind.NESTED_GAZE: NestedGazeDecoder,
    DecoderKind.BINARY_MAP: BinaryMapDecoder,
}


def create_decoder(kind: DecoderKind) -> PayloadDecoder:
    return DECODERS[DecoderKind(kind)]()


def create_context(
    settings: BridgeSettings,
    remote: Optional[RemoteEndpoint] = None,
) -> BridgeContext:
    """
    Creates a fresh bridge context. `remote` is only used when the settings enable it.
    """
    recorder = RecordingStateMachine(
        remote=remote if settings.remote.enabled else None,
        remote_config=settings.remote,
    )
    return BridgeContext(
        settings=settings,
        decoder=create_decoder(settings.decoder),
        recorder=recorder,
    )


def create_requester(ctx: zmq.asyncio.Context, settings: BridgeSettings) -> Optional[ZMQRequester]:
    if not settings.remote.enabled:
        return None
    return ZMQRequester(ctx, settings.remote.address)


def create_subscriber(
    ctx: zmq.asyncio.Context,
    settings: BridgeSettings,
    address: Optional[str] = None,
) -> ZMQSubscriber:
    return ZMQSubscriber(
        ctx,
        address=address or settings.ingest.address,
        topics=settings.subscribe_topics,
    )


def create_replier(ctx: zmq.asyncio.Context, settings: BridgeSettings) -> ZMQReplier:
    return ZMQReplier(ctx, settings.control.endpoint)


def sub_address_from_remote(remote_address: str, sub_port: str) -> str:
    """`tcp://host:50020` and `5001` give `tcp://host:5001`."""
    host, _, _ = remote_address.rpartition(":")
    return f"{host}:{sub_port}"
