from __future__ import annotations

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import (
    decode_hex,
    encode_hex,
    event_signature_to_log_topic,
    function_signature_to_4byte_selector,
    is_0x_prefixed,
    is_hex_address,
    to_normalized_address,
)

from swapchart.errors import DecodeError

ZERO_ADDRESS = "0x" + "0" * 40

GET_PAIR_SIGNATURE = "getPair(address,address)"
TOKEN0_SIGNATURE = "token0()"
SWAP_EVENT_SIGNATURE = "Swap(address,uint256,uint256,uint256,uint256,address)"

GET_PAIR_SELECTOR = encode_hex(function_signature_to_4byte_selector(GET_PAIR_SIGNATURE))
TOKEN0_SELECTOR = encode_hex(function_signature_to_4byte_selector(TOKEN0_SIGNATURE))
SWAP_TOPIC = encode_hex(event_signature_to_log_topic(SWAP_EVENT_SIGNATURE))


def is_address(value: str) -> bool:
    """0x-prefixed 20-byte hex; checksum casing is not enforced."""
    return isinstance(value, str) and is_0x_prefixed(value) and is_hex_address(value)


def same_address(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def encode_call(selector: str, *addresses: str) -> str:
    """selector + ABI-encoded address arguments, as eth_call data."""
    for a in addresses:
        if not is_address(a):
            raise ValueError(f"Not an address: {a!r}")
    args = encode(["address"] * len(addresses), [to_normalized_address(a) for a in addresses])
    return selector + args.hex()


def _to_bytes(data: str) -> bytes:
    if not isinstance(data, str) or not is_0x_prefixed(data):
        raise DecodeError(f"Expected 0x-prefixed hex, got {data!r}")
    try:
        return decode_hex(data)
    except ValueError:
        raise DecodeError(f"Invalid hex payload: {data[:20]!r}...") from None


def decode_uint_words(data: str, count: int) -> list[int]:
    """Decodes the first `count` uint256 words of an ABI-encoded payload."""
    try:
        return list(decode(["uint256"] * count, _to_bytes(data)))
    except DecodingError as e:
        raise DecodeError(f"Cannot decode {count} uint256 words: {e}") from e


def decode_address(data: str) -> str:
    """Decodes an address returned as a single 32-byte word (checksummed)."""
    try:
        (address,) = decode(["address"], _to_bytes(data))
    except DecodingError as e:
        raise DecodeError(f"Cannot decode address from {data!r}: {e}") from e
    return address
