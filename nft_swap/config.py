import json
import logging
import os
from typing import Literal, Mapping, Optional

from dotenv import load_dotenv
from eth_account import Account
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator, model_validator
from web3 import Web3

from .assets import AssetType
from .exceptions import ConfigError

_logger = logging.getLogger(__name__)

DEFAULT_CONTRACTS_FILE_PATH = os.path.join(
    os.path.dirname(os.path.realpath(__file__)), 'resources', 'nft_swap_contracts_address.json')

# env var name -> SwapConfig field
ENV_VARS = {
    'POLYGON_RPC': 'rpc_url',
    'MAKER_PVT_KEY': 'maker_private_key',
    'TAKER_PVT_KEY': 'taker_private_key',
    'NFT_CONTRACT': 'nft_contract',
    'ERC20_CONTRACT': 'erc20_contract',
}


def _checksum(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if not Web3.is_address(value):
        raise ValueError(f'invalid address: {value}')
    return Web3.to_checksum_address(value)


class GasConfig(BaseModel):
    source: Literal['static', 'gas_station'] = 'static'
    # wei; these can be obtained from the Polygon gas station
    max_priority_fee_per_gas: int = Field(44426392484, gt=0)
    max_fee_per_gas: int = Field(45426392484, gt=0)
    gas_station_url: str = 'https://gasstation.polygon.technology/v2'
    gas_station_tier: Literal['safeLow', 'standard', 'fast'] = 'fast'

    @model_validator(mode='after')
    def fee_cap_covers_tip(self):
        if self.max_fee_per_gas < self.max_priority_fee_per_gas:
            raise ValueError('max_fee_per_gas must be >= max_priority_fee_per_gas')
        return self


class NftConfig(BaseModel):
    token_id: int = Field(10, ge=0)
    type: AssetType = AssetType.ERC721
    amount: int = Field(1, gt=0)

    @field_validator('type')
    @classmethod
    def is_nft(cls, value: AssetType) -> AssetType:
        if not value.is_nft:
            raise ValueError(f'{value.value} is not an NFT type')
        return value


class Erc20Config(BaseModel):
    # includes all decimals, 1 USDT here
    amount: int = Field(1000000, gt=0)


class SwapConfig(BaseModel):
    rpc_url: str
    maker_private_key: SecretStr
    taker_private_key: SecretStr
    nft_contract: str
    erc20_contract: str

    chain_name: str = 'polygon'
    maker_address: Optional[str] = None
    taker_address: Optional[str] = None
    nft: NftConfig = NftConfig()
    erc20: Erc20Config = Erc20Config()
    gas: GasConfig = GasConfig()
    receipt_timeout_s: float = Field(120, gt=0)
    contracts_file_path: str = DEFAULT_CONTRACTS_FILE_PATH

    check_addresses = field_validator(
        'nft_contract', 'erc20_contract', 'maker_address', 'taker_address')(_checksum)

    @field_validator('maker_private_key', 'taker_private_key')
    @classmethod
    def valid_key(cls, value: SecretStr) -> SecretStr:
        try:
            Account.from_key(value.get_secret_value())
        except Exception:
            # don't echo the key back
            raise ValueError('not a valid private key') from None
        return value

    @model_validator(mode='after')
    def default_addresses_from_keys(self):
        if self.maker_address is None:
            self.maker_address = Account.from_key(self.maker_private_key.get_secret_value()).address
        if self.taker_address is None:
            self.taker_address = Account.from_key(self.taker_private_key.get_secret_value()).address
        return self


class ContractAddresses(BaseModel):
    chain_id: int
    exchange_proxy_address: str

    check_address = field_validator('exchange_proxy_address')(_checksum)


def _read_json(path: str) -> dict:
    try:
        with open(path, 'r') as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f'Failed to read {path}: {e}') from e


def load_config(config_path: Optional[str] = None, *, env_file: Optional[str] = None,
                environ: Optional[Mapping[str, str]] = None) -> SwapConfig:
    """
    Builds the run configuration.

    Secrets and contract addresses come from the environment (a ``.env`` file
    is loaded first when ``environ`` isn't given), everything else from the
    optional JSON run-config.
    """
    if environ is None:
        load_dotenv(env_file)
        environ = os.environ

    missing = [name for name in ENV_VARS if not environ.get(name)]
    if missing:
        raise ConfigError(f'Missing environment variables: {", ".join(missing)}')

    raw = _read_json(config_path) if config_path else {}
    if not isinstance(raw, dict):
        raise ConfigError(f'Run-config {config_path} must be a JSON object, got {type(raw).__name__}')
    if config_path:
        _logger.debug(f'Loaded run-config from {config_path}')

    for env_name, field_name in ENV_VARS.items():
        raw[field_name] = environ[env_name]

    try:
        return SwapConfig.model_validate(raw)
    except ValidationError as e:
        # only field names and messages, the inputs may be secrets
        problems = '; '.join(f'{".".join(map(str, err["loc"]))}: {err["msg"]}' for err in e.errors())
        raise ConfigError(f'Invalid configuration: {problems}') from None


def load_contract_addresses(chain_name: str, path: str = DEFAULT_CONTRACTS_FILE_PATH) -> ContractAddresses:
    _logger.debug(f'Loading contract addresses from {path}')
    contracts = _read_json(path)
    if chain_name not in contracts:
        raise ConfigError(f'Unknown chain_name={chain_name} in {path}, known: {sorted(contracts)}')
    try:
        return ContractAddresses.model_validate(contracts[chain_name])
    except ValidationError as e:
        raise ConfigError(f'Invalid contract addresses for {chain_name}: {e}') from e
