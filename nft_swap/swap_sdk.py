import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from eth_account import Account
from web3 import AsyncWeb3, Web3

from .abis import ERC20_ABI, EXCHANGE_PROXY_ABI, NFT_OPERATOR_ABI
from .assets import AssetType, SwappableAsset
from .exceptions import OrderSigningError, TransactionRevertedError, UnsupportedAssetError
from .order_utils import (
    DEFAULT_APP_ID,
    DEFAULT_EXPIRY,
    NULL_ADDRESS,
    NftOrder,
    OrderStatus,
    SignedNftOrder,
    TradeDirection,
    generate_order_nonce,
    sign_order,
    verify_order_signature,
)

MAX_UINT256 = 2 ** 256 - 1
# an ERC20 allowance this close to the max still counts as an unlimited approval
MAX_APPROVAL_WITH_BUFFER = MAX_UINT256 - 10 ** 17


@dataclass(frozen=True)
class ApprovalStatus:
    contract_approved: bool


class PendingTransaction:
    """A sent transaction. ``wait()`` blocks until it is mined."""

    def __init__(self, web3: AsyncWeb3, tx_hash: str, timeout_s: float):
        self._web3 = web3
        self.tx_hash = tx_hash
        self._timeout_s = timeout_s

    async def wait(self) -> dict:
        receipt = await self._web3.eth.wait_for_transaction_receipt(self.tx_hash, timeout=self._timeout_s)
        if receipt['status'] != 1:
            raise TransactionRevertedError(self.tx_hash, dict(receipt))
        return receipt

    def __repr__(self) -> str:
        return f'PendingTransaction(tx_hash={self.tx_hash})'


class NftSwap:
    """
    A signing session against the 0x v4 ExchangeProxy.

    Each session owns one private key. The maker session approves its NFT and
    signs orders, the taker session approves its ERC20 and fills them. Both
    can share the same ``AsyncWeb3`` connection.
    """

    def __init__(self, web3: AsyncWeb3, private_key: str, chain_id: int, exchange_proxy_address: str,
                 *, receipt_timeout_s: float = 120):
        self._logger = logging.getLogger(__name__)

        self._web3 = web3
        self.__account = Account.from_key(private_key)
        self._chain_id = chain_id
        self._exchange_proxy_address = Web3.to_checksum_address(exchange_proxy_address)
        self._receipt_timeout_s = receipt_timeout_s

        self.__exchange = web3.eth.contract(address=self._exchange_proxy_address, abi=EXCHANGE_PROXY_ABI)

    @property
    def signer_address(self) -> str:
        return self.__account.address

    @property
    def chain_id(self) -> int:
        return self._chain_id

    def __token_contract(self, asset: SwappableAsset):
        abi = ERC20_ABI if asset.type == AssetType.ERC20 else NFT_OPERATOR_ABI
        return self._web3.eth.contract(address=asset.token_address, abi=abi)

    async def __send(self, contract_function, tx_overrides: Optional[dict], description: str) -> PendingTransaction:
        tx_params = {
            'from': self.signer_address,
            'chainId': self._chain_id,
            'value': 0,
            'nonce': await self._web3.eth.get_transaction_count(self.signer_address, 'pending'),
        }
        tx_params.update(tx_overrides or {})

        tx = await contract_function.build_transaction(tx_params)
        signed_tx = self.__account.sign_transaction(tx)
        tx_hash = Web3.to_hex(await self._web3.eth.send_raw_transaction(signed_tx.raw_transaction))

        self._logger.info(f'Sent {description}: tx_hash={tx_hash}, nonce={tx_params["nonce"]}')
        return PendingTransaction(self._web3, tx_hash, self._receipt_timeout_s)

    async def load_approval_status(self, asset: SwappableAsset, wallet_address: str) -> ApprovalStatus:
        wallet_address = Web3.to_checksum_address(wallet_address)
        contract = self.__token_contract(asset)

        if asset.type == AssetType.ERC20:
            allowance = await contract.functions.allowance(wallet_address, self._exchange_proxy_address).call()
            self._logger.debug(f'{asset.token_address} allowance of {wallet_address}: {allowance}')
            approved = allowance >= MAX_APPROVAL_WITH_BUFFER
        else:
            approved = await contract.functions.isApprovedForAll(wallet_address, self._exchange_proxy_address).call()

        self._logger.debug(f'Approval status of {wallet_address} for {asset.token_address}: {approved}')
        return ApprovalStatus(contract_approved=bool(approved))

    async def approve_token_or_nft_by_asset(self, asset: SwappableAsset, wallet_address: str,
                                            tx_overrides: Optional[dict] = None) -> PendingTransaction:
        """Grants the ExchangeProxy an unlimited approval for the asset's contract."""
        if Web3.to_checksum_address(wallet_address) != self.signer_address:
            self._logger.warning(f'Approval for {wallet_address} will be sent from signer {self.signer_address}')

        contract = self.__token_contract(asset)
        if asset.type == AssetType.ERC20:
            fn = contract.functions.approve(self._exchange_proxy_address, MAX_UINT256)
        else:
            fn = contract.functions.setApprovalForAll(self._exchange_proxy_address, True)

        return await self.__send(fn, tx_overrides, f'{asset.type.value} approval for {asset.token_address}')

    def build_order(self, maker_assets: Sequence[SwappableAsset], taker_assets: Sequence[SwappableAsset],
                    maker_address: str, order_fields: Optional[dict] = None) -> NftOrder:
        """
        Builds an unsigned order in the format the ExchangeProxy understands.

        Exactly one NFT must be swapped for exactly one ERC20. The NFT on the
        maker side gives a sell order, on the taker side a buy order.

        order_fields may set ``taker`` (default anyone), ``expiry``, ``nonce``
        or ``app_id`` (used when the nonce is generated).
        """
        if len(maker_assets) != 1 or len(taker_assets) != 1:
            raise UnsupportedAssetError(
                f'Expected one asset per side, got maker={len(maker_assets)} taker={len(taker_assets)}')

        maker_asset, taker_asset = maker_assets[0], taker_assets[0]
        if maker_asset.type.is_nft and taker_asset.type == AssetType.ERC20:
            direction, nft, erc20 = TradeDirection.SELL_NFT, maker_asset, taker_asset
        elif maker_asset.type == AssetType.ERC20 and taker_asset.type.is_nft:
            direction, nft, erc20 = TradeDirection.BUY_NFT, taker_asset, maker_asset
        else:
            raise UnsupportedAssetError(
                f'Can only swap an NFT for an ERC20, got {maker_asset.type.value} for {taker_asset.type.value}')

        order_fields = order_fields or {}
        nonce = order_fields.get('nonce')
        if nonce is None:
            nonce = generate_order_nonce(order_fields.get('app_id', DEFAULT_APP_ID))

        return NftOrder(
            direction=direction,
            maker=Web3.to_checksum_address(maker_address),
            taker=Web3.to_checksum_address(order_fields.get('taker', NULL_ADDRESS)),
            expiry=int(order_fields.get('expiry', DEFAULT_EXPIRY)),
            nonce=int(nonce),
            erc20_token=erc20.token_address,
            erc20_token_amount=erc20.amount,
            nft_type=nft.type,
            nft_token=nft.token_address,
            nft_token_id=nft.token_id,
            nft_token_amount=nft.nft_amount,
        )

    async def sign_order(self, order: NftOrder, signer_address: Optional[str] = None) -> SignedNftOrder:
        signer_address = Web3.to_checksum_address(signer_address or order.maker)
        if signer_address != self.signer_address or order.maker != self.signer_address:
            raise OrderSigningError(
                f'Session signer {self.signer_address} can not sign for {signer_address} (order maker {order.maker})')

        signed_order = await asyncio.get_running_loop().run_in_executor(
            None, sign_order, self.__account.key, order, self._chain_id, self._exchange_proxy_address)

        self._logger.debug(f'Signed order nonce={order.nonce}: {signed_order.signature.to_dict()}')
        return signed_order

    async def fill_signed_order(self, signed_order: SignedNftOrder, fill_overrides: Optional[dict] = None,
                                tx_overrides: Optional[dict] = None) -> PendingTransaction:
        """
        Settles a signed order on chain from this session's wallet.

        fill_overrides may set ``amount`` (ERC1155 partial fills) and, for buy
        orders, ``token_id`` of the NFT being sold into the order.
        """
        if signed_order.chain_id != self._chain_id:
            raise UnsupportedAssetError(
                f'Order was signed for chain_id={signed_order.chain_id}, session is on {self._chain_id}')
        verify_order_signature(signed_order)

        order = signed_order.order
        fill_overrides = fill_overrides or {}
        amount = int(fill_overrides.get('amount', order.nft_token_amount))
        token_id = int(fill_overrides.get('token_id', order.nft_token_id))
        order_tuple = order.to_contract_tuple()
        signature_tuple = signed_order.signature.to_contract_tuple()
        functions = self.__exchange.functions

        if order.direction == TradeDirection.SELL_NFT:
            if order.nft_type == AssetType.ERC721:
                fn = functions.buyERC721(order_tuple, signature_tuple, b'')
            else:
                fn = functions.buyERC1155(order_tuple, signature_tuple, amount, b'')
        else:
            if order.nft_type == AssetType.ERC721:
                fn = functions.sellERC721(order_tuple, signature_tuple, token_id, False, b'')
            else:
                fn = functions.sellERC1155(order_tuple, signature_tuple, token_id, amount, False, b'')

        return await self.__send(fn, tx_overrides, f'fill of order nonce={order.nonce}')

    async def cancel_order(self, nonce: int, nft_type: AssetType,
                           tx_overrides: Optional[dict] = None) -> PendingTransaction:
        functions = self.__exchange.functions
        if nft_type == AssetType.ERC721:
            fn = functions.cancelERC721Order(int(nonce))
        elif nft_type == AssetType.ERC1155:
            fn = functions.cancelERC1155Order(int(nonce))
        else:
            raise UnsupportedAssetError(f'No order type for {nft_type}')

        return await self.__send(fn, tx_overrides, f'cancel of order nonce={nonce}')

    async def get_order_status(self, signed_order: SignedNftOrder) -> OrderStatus:
        order = signed_order.order
        functions = self.__exchange.functions
        if order.nft_type == AssetType.ERC721:
            status = await functions.getERC721OrderStatus(order.to_contract_tuple()).call()
        else:
            order_info = await functions.getERC1155OrderInfo(order.to_contract_tuple()).call()
            status = order_info[1]
        return OrderStatus(status)
