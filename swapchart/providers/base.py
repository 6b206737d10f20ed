from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class ChainProvider(ABC):
    """
    Provider contract (interface).

    Any provider must implement:
    - call(): read-only contract call (eth_call), returns hex result
    - block_number(): latest block height
    - get_logs(): raw log dicts for an address/topic filter over a block range
    - get_block_timestamp(): unix timestamp of a block
    """

    @abstractmethod
    async def call(self, to: str, data: str) -> str:
        raise NotImplementedError

    @abstractmethod
    async def block_number(self) -> int:
        raise NotImplementedError

    @abstractmethod
    async def get_logs(
        self,
        address: str,
        topics: List[Optional[str]],
        from_block: int,
        to_block: int,
    ) -> List[Dict]:
        raise NotImplementedError

    @abstractmethod
    async def get_block_timestamp(self, block_number: int) -> int:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None
