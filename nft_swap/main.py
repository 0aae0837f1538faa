import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

import orjson
from web3 import AsyncHTTPProvider, AsyncWeb3

from .config import SwapConfig, load_config, load_contract_addresses
from .exceptions import ConfigError
from .gas_station import resolve_gas_fees
from .order_utils import SignedNftOrder
from .swap import SwapOutcome, run_swap
from .swap_sdk import NftSwap

_logger = logging.getLogger(__name__)


class SwapArgParser:
    def __init__(self, description: str = 'NFT swap'):
        self._parser = argparse.ArgumentParser(description=description)
        self._parser.add_argument('-c', '--config', default=None, help='Path to the JSON run-config')
        self._parser.add_argument('--env-file', default=None, help='Path to a .env file (default: search for .env)')
        self._parser.add_argument('--log-level', default='INFO', help='Logging level')
        self._parser.add_argument('--dump-signed-order', default=None, metavar='PATH',
                                  help='Write the signed order as JSON to PATH')

    def parse_args(self, argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
        return self._parser.parse_args(argv)


def _signed_order_writer(path: str):
    def write(signed_order: SignedNftOrder) -> None:
        with open(path, 'wb') as f:
            f.write(orjson.dumps(signed_order.to_dict(), option=orjson.OPT_INDENT_2))
        _logger.info(f'Signed order written to {path}')
    return write


async def swap(config: SwapConfig, dump_signed_order: Optional[str] = None) -> SwapOutcome:
    contracts = load_contract_addresses(config.chain_name, config.contracts_file_path)
    web3 = AsyncWeb3(AsyncHTTPProvider(config.rpc_url))
    try:
        chain_id = await web3.eth.chain_id
        if chain_id != contracts.chain_id:
            raise ConfigError(f'RPC endpoint is on chain_id={chain_id}, '
                              f'{config.chain_name} expects {contracts.chain_id}')

        gas_fees = await resolve_gas_fees(config.gas)

        maker_sdk = NftSwap(web3, config.maker_private_key.get_secret_value(), chain_id,
                            contracts.exchange_proxy_address, receipt_timeout_s=config.receipt_timeout_s)
        taker_sdk = NftSwap(web3, config.taker_private_key.get_secret_value(), chain_id,
                            contracts.exchange_proxy_address, receipt_timeout_s=config.receipt_timeout_s)

        on_signed_order = _signed_order_writer(dump_signed_order) if dump_signed_order else None
        return await run_swap(config, maker_sdk, taker_sdk, gas_fees, on_signed_order)
    finally:
        await web3.provider.disconnect()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = SwapArgParser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO),
                        format='%(asctime)s %(levelname)s %(message)s [%(name)s]')

    try:
        config = load_config(args.config, env_file=args.env_file)
        outcome = asyncio.run(swap(config, args.dump_signed_order))
    except Exception as e:
        _logger.exception('Swap failed: %r', e)
        return 1

    _logger.info(f'Swap run finished: {outcome.value}')
    return 0


if __name__ == '__main__':
    sys.exit(main())
