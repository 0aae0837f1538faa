from dataclasses import dataclass
from enum import Enum
from typing import Optional

from web3 import Web3

from .exceptions import UnsupportedAssetError


class AssetType(str, Enum):
    ERC20 = "ERC20"
    ERC721 = "ERC721"
    ERC1155 = "ERC1155"

    @property
    def is_nft(self) -> bool:
        return self != AssetType.ERC20


@dataclass(frozen=True)
class SwappableAsset:
    """
    One side of a swap: a token contract plus either a token id (NFTs), an
    amount in the token's smallest unit (ERC20), or both (ERC1155).
    """
    token_address: str
    type: AssetType
    token_id: Optional[int] = None
    amount: Optional[int] = None

    def __post_init__(self):
        if not Web3.is_address(self.token_address):
            raise UnsupportedAssetError(f"Invalid token address: {self.token_address}")
        object.__setattr__(self, "token_address", Web3.to_checksum_address(self.token_address))
        object.__setattr__(self, "type", AssetType(self.type))

        if self.type.is_nft and self.token_id is None:
            raise UnsupportedAssetError(f"{self.type.value} asset requires a token_id")
        if self.type == AssetType.ERC20 and self.token_id is not None:
            raise UnsupportedAssetError("ERC20 asset can't have a token_id")
        if self.type != AssetType.ERC721 and (self.amount is None or self.amount <= 0):
            raise UnsupportedAssetError(f"{self.type.value} asset requires a positive amount")

    @property
    def nft_amount(self) -> int:
        if self.type == AssetType.ERC721:
            return 1
        return self.amount


def erc721(token_address: str, token_id: int) -> SwappableAsset:
    return SwappableAsset(token_address, AssetType.ERC721, token_id=int(token_id))


def erc1155(token_address: str, token_id: int, amount: int) -> SwappableAsset:
    return SwappableAsset(token_address, AssetType.ERC1155, token_id=int(token_id), amount=int(amount))


def erc20(token_address: str, amount: int) -> SwappableAsset:
    return SwappableAsset(token_address, AssetType.ERC20, amount=int(amount))
