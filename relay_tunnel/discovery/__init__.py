from .destination import Destination, parse_destination
from .resolver import RelayResolver, StaticRelayResolver, relay_base_url

__all__ = [
    "Destination",
    "RelayResolver",
    "StaticRelayResolver",
    "parse_destination",
    "relay_base_url",
]
