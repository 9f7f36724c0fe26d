"""RPC protocol types shared by the bridge, devices and transports."""

from pixelbot.hardware.protocol.envelope import (
    NotifyEvent,
    OutboundType,
    RpcEnvelope,
    RpcRequest,
    RpcResponse,
    RpcResult,
    make_outbound,
)

__all__ = [
    "NotifyEvent",
    "OutboundType",
    "RpcEnvelope",
    "RpcRequest",
    "RpcResponse",
    "RpcResult",
    "make_outbound",
]
