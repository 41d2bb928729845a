from .read_loop import ReadLoop
from .capability import DuplexStream
from .client import RelayStreamClient
from .transport import RelayTransport
from .write_queue import WriteQueue, split_chunks
from .backoff import RetryPlan, BackoffController
from .codec import to_url_safe, decode_bytes, encode_bytes, from_url_safe, approx_decoded_length

__all__ = [
    "BackoffController",
    "DuplexStream",
    "ReadLoop",
    "RelayStreamClient",
    "RelayTransport",
    "RetryPlan",
    "WriteQueue",
    "approx_decoded_length",
    "decode_bytes",
    "encode_bytes",
    "from_url_safe",
    "split_chunks",
    "to_url_safe",
]
