"""
The maker/taker swap flow.

    1. maker approval status -> approve and stop if missing
    2. build the order and have the maker sign it
    3. taker approval status -> approve and stop if missing
    4. fill the signed order

Approvals are unlimited, so each side only ever approves once. A run that
stops after an approval is re-invoked from scratch.
"""
import logging
from enum import Enum
from typing import Callable, Optional, Tuple

from .assets import SwappableAsset
from .config import SwapConfig
from .gas_station import GasFees
from .order_utils import SignedNftOrder
from .swap_sdk import NftSwap

_logger = logging.getLogger(__name__)


class SwapOutcome(str, Enum):
    MAKER_APPROVED = "MAKER_APPROVED"
    TAKER_APPROVED = "TAKER_APPROVED"
    FILLED = "FILLED"


def build_assets(config: SwapConfig) -> Tuple[SwappableAsset, SwappableAsset]:
    """Returns (maker asset, taker asset): the NFT for sale and the ERC20 price."""
    nft = SwappableAsset(
        config.nft_contract,
        config.nft.type,
        token_id=config.nft.token_id,
        amount=config.nft.amount,
    )
    price = SwappableAsset(config.erc20_contract, "ERC20", amount=config.erc20.amount)
    return nft, price


async def run_swap(config: SwapConfig, maker_sdk: NftSwap, taker_sdk: NftSwap, gas_fees: GasFees,
                   on_signed_order: Optional[Callable[[SignedNftOrder], None]] = None) -> SwapOutcome:
    """
    Runs the swap flow once. Nothing is caught here: any failure ends the run
    and propagates to the caller.
    """
    maker_asset, taker_asset = build_assets(config)
    maker_assets, taker_assets = [maker_asset], [taker_asset]
    tx_overrides = gas_fees.to_tx_params()

    maker_status = await maker_sdk.load_approval_status(maker_asset, config.maker_address)
    if not maker_status.contract_approved:
        _logger.info('maker approving')
        approval_tx = await maker_sdk.approve_token_or_nft_by_asset(maker_asset, config.maker_address, tx_overrides)
        receipt = await approval_tx.wait()
        _logger.info(f'Approved {maker_asset.token_address} contract to swap with 0x '
                     f'(txHash: {_tx_hash(receipt)})')
        return SwapOutcome.MAKER_APPROVED

    _logger.info('maker already approved')
    order = maker_sdk.build_order(maker_assets, taker_assets, config.maker_address)
    signed_order = await maker_sdk.sign_order(order, config.maker_address)
    _logger.info(f'Maker signed order nonce={order.nonce}')
    if on_signed_order is not None:
        on_signed_order(signed_order)

    taker_status = await taker_sdk.load_approval_status(taker_asset, config.taker_address)
    if not taker_status.contract_approved:
        _logger.info('taker approving')
        approval_tx = await taker_sdk.approve_token_or_nft_by_asset(taker_asset, config.taker_address, tx_overrides)
        receipt = await approval_tx.wait()
        _logger.info(f'Approved {taker_asset.token_address} contract to swap with 0x '
                     f'(txHash: {_tx_hash(receipt)})')
        return SwapOutcome.TAKER_APPROVED

    _logger.info('ready to swap')
    fill_tx = await taker_sdk.fill_signed_order(signed_order, {}, tx_overrides)
    receipt = await fill_tx.wait()
    _logger.info(f'Order filled. TxHash: {_tx_hash(receipt)}')
    return SwapOutcome.FILLED


def _tx_hash(receipt) -> str:
    tx_hash = receipt['transactionHash']
    return tx_hash if isinstance(tx_hash, str) else '0x' + bytes(tx_hash).hex()
