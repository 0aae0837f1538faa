from .assets import AssetType, SwappableAsset
from .exceptions import (
    ConfigError,
    GasStationError,
    InvalidSignatureError,
    NftSwapError,
    OrderSigningError,
    TransactionRevertedError,
    UnsupportedAssetError,
)
from .order_utils import NftOrder, SignedNftOrder
from .swap import SwapOutcome, run_swap
from .swap_sdk import ApprovalStatus, NftSwap, PendingTransaction

__all__ = [
    "AssetType",
    "SwappableAsset",
    "ConfigError",
    "GasStationError",
    "InvalidSignatureError",
    "NftSwapError",
    "OrderSigningError",
    "TransactionRevertedError",
    "UnsupportedAssetError",
    "NftOrder",
    "SignedNftOrder",
    "SwapOutcome",
    "run_swap",
    "ApprovalStatus",
    "NftSwap",
    "PendingTransaction",
]
