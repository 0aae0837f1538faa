import logging
import sys

from eth_account import Account
from web3 import Web3

from nft_swap.assets import AssetType
from nft_swap.order_utils import NULL_ADDRESS, NftOrder, TradeDirection

MAKER_PRIVATE_KEY = '0x' + '11' * 32
TAKER_PRIVATE_KEY = '0x' + '22' * 32
MAKER_ADDRESS = Account.from_key(MAKER_PRIVATE_KEY).address
TAKER_ADDRESS = Account.from_key(TAKER_PRIVATE_KEY).address

NFT_CONTRACT = '0x' + 'aa' * 20
ERC20_CONTRACT = '0x' + 'bb' * 20
EXCHANGE_PROXY_ADDRESS = '0xDef1C0ded9bec7F1a1670819833240f027b25EfF'
POLYGON_CHAIN_ID = 137


def make_environ(**overrides) -> dict:
    environ = {
        'POLYGON_RPC': 'http://localhost:8545',
        'MAKER_PVT_KEY': MAKER_PRIVATE_KEY,
        'TAKER_PVT_KEY': TAKER_PRIVATE_KEY,
        'NFT_CONTRACT': NFT_CONTRACT,
        'ERC20_CONTRACT': ERC20_CONTRACT,
    }
    environ.update(overrides)
    return environ


def configure_test_logging():
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.formatter = logging.Formatter('%(asctime)s %(levelname)s %(message)s [%(name)s]')

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.INFO)


def make_order(nft_type=AssetType.ERC721, **overrides) -> NftOrder:
    fields = dict(
        direction=TradeDirection.SELL_NFT,
        maker=MAKER_ADDRESS,
        taker=NULL_ADDRESS,
        expiry=2524604400,
        nonce=12345,
        erc20_token=Web3.to_checksum_address(ERC20_CONTRACT),
        erc20_token_amount=1000000,
        nft_type=nft_type,
        nft_token=Web3.to_checksum_address(NFT_CONTRACT),
        nft_token_id=10,
        nft_token_amount=1 if nft_type == AssetType.ERC721 else 5,
    )
    fields.update(overrides)
    return NftOrder(**fields)
