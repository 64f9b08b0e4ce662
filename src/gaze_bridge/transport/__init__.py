from .base import ControlEndpoint, IngestEndpoint, RemoteEndpoint
from .zmq import ZMQEndpoint, ZMQReplier, ZMQRequester, ZMQSubscriber
