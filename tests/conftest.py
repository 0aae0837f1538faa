import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from nft_swap.config import load_config  # noqa: E402
from nft_swap.order_utils import OrderSignature, SignedNftOrder  # noqa: E402
from nft_swap.swap_sdk import ApprovalStatus  # noqa: E402

from tests.common import EXCHANGE_PROXY_ADDRESS, POLYGON_CHAIN_ID, make_environ, make_order  # noqa: E402


class StubPendingTransaction:
    def __init__(self, tx_hash: str, error: Exception = None):
        self.tx_hash = tx_hash
        self._error = error

    async def wait(self):
        if self._error:
            raise self._error
        return {'transactionHash': self.tx_hash, 'status': 1}


class StubNftSwap:
    """Records every session call; raises from the call named in ``error_on``."""

    def __init__(self, name: str, approved: bool = True):
        self.name = name
        self.approved = approved
        self.calls = []
        self.error_on = None
        self.error = RuntimeError(f'{name} failed')
        self.wait_error = None
        self.orders = []
        self.signed_orders = []

    def _record(self, method, *args):
        self.calls.append((method, args))
        if self.error_on == method:
            raise self.error

    def call_names(self):
        return [method for method, _ in self.calls]

    async def load_approval_status(self, asset, wallet_address):
        self._record('load_approval_status', asset, wallet_address)
        return ApprovalStatus(contract_approved=self.approved)

    async def approve_token_or_nft_by_asset(self, asset, wallet_address, tx_overrides=None):
        self._record('approve_token_or_nft_by_asset', asset, wallet_address, tx_overrides)
        return StubPendingTransaction(f'0x{self.name}-approval', self.wait_error)

    def build_order(self, maker_assets, taker_assets, maker_address, order_fields=None):
        self._record('build_order', maker_assets, taker_assets, maker_address)
        self.orders.append(make_order(maker=maker_address, nonce=len(self.orders) + 1))
        return self.orders[-1]

    async def sign_order(self, order, signer_address=None):
        self._record('sign_order', order, signer_address)
        signature = OrderSignature(v=27, r=b'\x01' * 32, s=b'\x02' * 32)
        self.signed_orders.append(SignedNftOrder(order, signature, POLYGON_CHAIN_ID, EXCHANGE_PROXY_ADDRESS))
        return self.signed_orders[-1]

    async def fill_signed_order(self, signed_order, fill_overrides=None, tx_overrides=None):
        self._record('fill_signed_order', signed_order, fill_overrides, tx_overrides)
        return StubPendingTransaction(f'0x{self.name}-fill', self.wait_error)


@pytest.fixture()
def swap_config():
    return load_config(environ=make_environ())


@pytest.fixture()
def maker_sdk():
    return StubNftSwap('maker')


@pytest.fixture()
def taker_sdk():
    return StubNftSwap('taker')
