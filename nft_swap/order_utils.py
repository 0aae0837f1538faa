"""
0x v4 NFT order structs and their EIP-712 signatures.

An order is signed against the ``ZeroEx`` domain of the ExchangeProxy on the
target chain. The signature layout follows ``LibSignature.Signature``:
``(signatureType, v, r, s)`` with ``signatureType == 2`` for EIP-712.
"""
import secrets
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Tuple

from eth_account import Account
from eth_account.messages import encode_typed_data
from web3 import Web3

from .assets import AssetType
from .exceptions import InvalidSignatureError, OrderSigningError

NULL_ADDRESS = '0x0000000000000000000000000000000000000000'

# 2050-01-01, the order expiry the swap SDK uses when none is given
DEFAULT_EXPIRY = 2524604400
DEFAULT_APP_ID = 314159

SIGNATURE_TYPE_EIP712 = 2

EIP712_DOMAIN_NAME = 'ZeroEx'
EIP712_DOMAIN_VERSION = '1.0.0'

_FEE_TYPE = [
    {"name": "recipient", "type": "address"},
    {"name": "amount", "type": "uint256"},
    {"name": "feeData", "type": "bytes"},
]
_PROPERTY_TYPE = [
    {"name": "propertyValidator", "type": "address"},
    {"name": "propertyData", "type": "bytes"},
]


class TradeDirection(IntEnum):
    SELL_NFT = 0
    BUY_NFT = 1


class OrderStatus(IntEnum):
    INVALID = 0
    FILLABLE = 1
    UNFILLABLE = 2
    EXPIRED = 3


def generate_order_nonce(app_id: int = DEFAULT_APP_ID) -> int:
    # high bits tag the app, low 128 bits are random
    return (app_id << 128) | secrets.randbits(128)


def _order_type_name(nft_type: AssetType) -> str:
    if nft_type == AssetType.ERC721:
        return 'ERC721Order'
    if nft_type == AssetType.ERC1155:
        return 'ERC1155Order'
    raise ValueError(f'Not an NFT type: {nft_type}')


@dataclass(frozen=True)
class NftOrder:
    direction: TradeDirection
    maker: str
    taker: str
    expiry: int
    nonce: int
    erc20_token: str
    erc20_token_amount: int
    nft_type: AssetType
    nft_token: str
    nft_token_id: int
    nft_token_amount: int = 1

    @property
    def type_name(self) -> str:
        return _order_type_name(self.nft_type)

    def to_message(self) -> dict:
        prefix = self.nft_type.value.lower()
        message = {
            "direction": int(self.direction),
            "maker": Web3.to_checksum_address(self.maker),
            "taker": Web3.to_checksum_address(self.taker),
            "expiry": self.expiry,
            "nonce": self.nonce,
            "erc20Token": Web3.to_checksum_address(self.erc20_token),
            "erc20TokenAmount": self.erc20_token_amount,
            "fees": [],
            f"{prefix}Token": Web3.to_checksum_address(self.nft_token),
            f"{prefix}TokenId": self.nft_token_id,
            f"{prefix}TokenProperties": [],
        }
        if self.nft_type == AssetType.ERC1155:
            message["erc1155TokenAmount"] = self.nft_token_amount
        return message

    def to_contract_tuple(self) -> tuple:
        # ABI order of LibNFTOrder.ERC721Order / ERC1155Order
        return tuple(self.to_message().values())

    def to_dict(self) -> dict:
        message = self.to_message()
        for key, value in message.items():
            if isinstance(value, int) and key != "direction":
                message[key] = str(value)
        message["nftType"] = self.nft_type.value
        return message


@dataclass(frozen=True)
class OrderSignature:
    v: int
    r: bytes
    s: bytes
    signature_type: int = SIGNATURE_TYPE_EIP712

    def to_contract_tuple(self) -> tuple:
        return self.signature_type, self.v, self.r, self.s

    def to_dict(self) -> dict:
        return {
            "signatureType": self.signature_type,
            "v": self.v,
            "r": Web3.to_hex(self.r),
            "s": Web3.to_hex(self.s),
        }


@dataclass(frozen=True)
class SignedNftOrder:
    order: NftOrder
    signature: OrderSignature
    chain_id: int
    exchange_proxy_address: str = field(default=NULL_ADDRESS)

    def to_dict(self) -> dict:
        payload = self.order.to_dict()
        payload["signature"] = self.signature.to_dict()
        payload["chainId"] = self.chain_id
        payload["verifyingContract"] = self.exchange_proxy_address
        return payload


def build_typed_data(order: NftOrder, chain_id: int, exchange_proxy_address: str) -> Tuple[dict, dict, dict]:
    """Returns (domain, types, message) ready for eth_account's typed-data helpers."""
    domain = {
        "name": EIP712_DOMAIN_NAME,
        "version": EIP712_DOMAIN_VERSION,
        "chainId": chain_id,
        "verifyingContract": Web3.to_checksum_address(exchange_proxy_address),
    }

    prefix = order.nft_type.value.lower()
    order_type = [
        {"name": "direction", "type": "uint8"},
        {"name": "maker", "type": "address"},
        {"name": "taker", "type": "address"},
        {"name": "expiry", "type": "uint256"},
        {"name": "nonce", "type": "uint256"},
        {"name": "erc20Token", "type": "address"},
        {"name": "erc20TokenAmount", "type": "uint256"},
        {"name": "fees", "type": "Fee[]"},
        {"name": f"{prefix}Token", "type": "address"},
        {"name": f"{prefix}TokenId", "type": "uint256"},
        {"name": f"{prefix}TokenProperties", "type": "Property[]"},
    ]
    if order.nft_type == AssetType.ERC1155:
        order_type.append({"name": "erc1155TokenAmount", "type": "uint128"})

    types = {
        order.type_name: order_type,
        "Fee": _FEE_TYPE,
        "Property": _PROPERTY_TYPE,
    }
    return domain, types, order.to_message()


def sign_order(private_key: str, order: NftOrder, chain_id: int, exchange_proxy_address: str) -> SignedNftOrder:
    try:
        domain, types, message = build_typed_data(order, chain_id, exchange_proxy_address)
        signed = Account.sign_typed_data(private_key, domain, types, message)
        signature = OrderSignature(
            v=signed.v,
            r=signed.r.to_bytes(32, 'big'),
            s=signed.s.to_bytes(32, 'big'),
        )
    except Exception:
        # Making sure we don't include any private key details
        raise OrderSigningError(f'Error signing order nonce={order.nonce}') from None

    return SignedNftOrder(order, signature, chain_id, Web3.to_checksum_address(exchange_proxy_address))


def recover_signer(signed_order: SignedNftOrder) -> str:
    domain, types, message = build_typed_data(
        signed_order.order, signed_order.chain_id, signed_order.exchange_proxy_address)
    signable = encode_typed_data(domain, types, message)
    signature = signed_order.signature
    return Account.recover_message(
        signable,
        vrs=(signature.v, int.from_bytes(signature.r, 'big'), int.from_bytes(signature.s, 'big')),
    )


def verify_order_signature(signed_order: SignedNftOrder) -> None:
    maker = Web3.to_checksum_address(signed_order.order.maker)
    recovered = recover_signer(signed_order)
    if recovered != maker:
        raise InvalidSignatureError(maker, recovered)
