from __future__ import annotations

from typing import Any, Optional


class NftSwapError(Exception):
    """Base class for every error raised by nft_swap itself."""


class ConfigError(NftSwapError):
    """Raised when the environment or the run-config is missing or invalid."""


class UnsupportedAssetError(NftSwapError):
    """Raised when an asset pairing can't be expressed as a 0x v4 NFT order."""


class OrderSigningError(NftSwapError):
    """Raised when an order can't be signed. Never carries key material."""


class InvalidSignatureError(NftSwapError):
    """Raised when a signed order does not recover to its maker."""

    def __init__(self, expected_signer: str, recovered_signer: str):
        super().__init__(f"signature recovers to {recovered_signer}, expected {expected_signer}")
        self.expected_signer = expected_signer
        self.recovered_signer = recovered_signer


class TransactionRevertedError(NftSwapError):
    """Raised when a mined transaction reports status 0."""

    def __init__(self, tx_hash: str, receipt: Optional[dict[str, Any]] = None):
        super().__init__(f"transaction {tx_hash} reverted")
        self.tx_hash = tx_hash
        self.receipt = receipt or {}

    def __str__(self) -> str:
        base = f"TransactionRevertedError: {self.tx_hash}"
        block_number = self.receipt.get("blockNumber")
        if block_number is not None:
            base += f" [block={block_number}]"
        gas_used = self.receipt.get("gasUsed")
        if gas_used is not None:
            base += f" [gas_used={gas_used}]"
        return base


class GasStationError(NftSwapError):
    """Raised when the gas station can't provide fee estimates."""

    def __init__(self, status_code: int, message: str, *, payload: Optional[dict[str, Any]] = None):
        super().__init__(f"[{status_code}] {message}")
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}

    def __str__(self) -> str:
        base = f"GasStationError({self.status_code}): {self.message}"
        if self.payload:
            base += f" | payload keys={list(self.payload.keys())}"
        return base
