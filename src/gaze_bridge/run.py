import argparse
import asyncio
import logging
import sys

import zmq.asyncio
from pydantic import ValidationError

from . import __version__
from .configs import BridgeSettings, DecoderKind
from .core import BridgeRunner
from .errors import UpstreamUnreachableError
from .factories import (
    create_context,
    create_replier,
    create_requester,
    create_subscriber,
    sub_address_from_remote,
)

logger = logging.getLogger(__name__)


async def discover_sub_address(requester, settings: BridgeSettings) -> str:
    """Asks the remote-control endpoint which port the telemetry is published on."""
    timeout_s = settings.remote.timeout_ms / 1000
    sub_port = (await requester.request_reply(b"SUB_PORT", timeout_s)).decode()
    address = sub_address_from_remote(settings.remote.address, sub_port)
    logger.info(f"Remote control reports SUB_PORT={sub_port}")
    return address


async def serve(settings: BridgeSettings) -> None:
    """
    Opens every socket, runs the bridge loop until it fails or is cancelled,
    and closes the sockets again.
    """
    ctx = zmq.asyncio.Context()
    endpoints = []
    try:
        requester = create_requester(ctx, settings)
        address = None
        if requester is not None:
            endpoints.append(requester)
            await requester.start()
            if settings.ingest.discover_port:
                address = await discover_sub_address(requester, settings)

        subscriber = create_subscriber(ctx, settings, address)
        endpoints.append(subscriber)
        await subscriber.start()

        replier = create_replier(ctx, settings)
        endpoints.append(replier)
        await replier.start()

        context = create_context(settings, remote=requester)
        runner = BridgeRunner(context, ingest=subscriber, control=replier)
        await runner.run()
    finally:
        for endpoint in endpoints:
            await endpoint.close()
        ctx.term()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bridge between a gaze telemetry feed and a recording controller")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Subscribe to every topic and log raw ingest frames."
    )
    parser.add_argument(
        "--decoder",
        choices=[kind.value for kind in DecoderKind],
        help="Wire shape of the ingest payloads."
    )
    parser.add_argument(
        "--no-remote",
        action="store_true",
        help="Do not mirror start/stop to the sensor's remote-control endpoint."
    )
    parser.add_argument(
        "--control-endpoint",
        help="Address the control replier binds to, e.g. tcp://*:6000."
    )
    return parser.parse_args(argv)


def apply_overrides(settings: BridgeSettings, args: argparse.Namespace) -> BridgeSettings:
    """Returns a validated copy of the settings with the command-line flags applied."""
    data = settings.model_dump()
    if args.debug:
        data["debug"] = True
    if args.decoder:
        data["decoder"] = args.decoder
    if args.no_remote:
        data["remote"]["enabled"] = False
    if args.control_endpoint:
        data["control"]["endpoint"] = args.control_endpoint
    return BridgeSettings.model_validate(data)


def main(argv=None):
    """
    The main entry point for the gaze bridge.
    """
    args = parse_args(argv)

    # 1. Load Configuration
    try:
        settings = apply_overrides(BridgeSettings(), args)
    except ValidationError as e:
        print(f"Configuration Error: {e}")
        sys.exit(1)

    # 2. Configure Logging
    logging.basicConfig(
        level=settings.log_level,
        format=settings.logging.format,
        stream=sys.stdout,
    )
    logger.info(f"Starting gaze bridge v{__version__} with the {settings.decoder.value} decoder")
    if settings.debug:
        logger.info("RUNNING IN DEBUG MODE.")

    # 3. Run until interrupted or the sensor stops answering
    try:
        asyncio.run(serve(settings))
    except UpstreamUnreachableError as e:
        logger.critical("Remote control unreachable, cannot keep the recording consistent: %s", e)
        sys.exit(2)
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    finally:
        logger.info("Gaze bridge has shut down.")
