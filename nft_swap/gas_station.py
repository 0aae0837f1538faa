from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import aiohttp

from .exceptions import GasStationError

_logger = logging.getLogger(__name__)

GWEI = Decimal(10 ** 9)


@dataclass(frozen=True)
class GasFees:
    max_priority_fee_per_gas: int
    max_fee_per_gas: int

    def to_tx_params(self) -> dict:
        return {
            "maxPriorityFeePerGas": self.max_priority_fee_per_gas,
            "maxFeePerGas": self.max_fee_per_gas,
        }


def _gwei_to_wei(value: Any, field_name: str, status_code: int) -> int:
    try:
        return int(Decimal(str(value)) * GWEI)
    except (InvalidOperation, ValueError):
        raise GasStationError(status_code, f"invalid {field_name}: {value!r}")


class GasStationClient:
    """Reads EIP-1559 fee suggestions from a Polygon-style gas station (v2 API)."""

    def __init__(self, url: str, *, tier: str = "fast", timeout: int | None = 10):
        self._url = url
        self._tier = tier
        self._timeout = aiohttp.ClientTimeout(total=timeout) if timeout else None
        self._session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "GasStationClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def get_fees(self) -> GasFees:
        session = await self._ensure_session()
        async with session.get(self._url) as resp:
            try:
                data = await resp.json(content_type=None)
            except Exception:
                text = await resp.text()
                raise GasStationError(resp.status, f"Non-JSON response: {text}")

            if resp.status >= 400:
                raise GasStationError(resp.status, str(data), payload=data if isinstance(data, dict) else None)

        tier = data.get(self._tier) if isinstance(data, dict) else None
        if not isinstance(tier, dict):
            raise GasStationError(resp.status, f"missing '{self._tier}' tier",
                                  payload=data if isinstance(data, dict) else None)

        fees = GasFees(
            max_priority_fee_per_gas=_gwei_to_wei(tier.get("maxPriorityFee"), "maxPriorityFee", resp.status),
            max_fee_per_gas=_gwei_to_wei(tier.get("maxFee"), "maxFee", resp.status),
        )
        _logger.debug(f"Gas station {self._tier} fees: {fees}")
        return fees


async def resolve_gas_fees(gas_config) -> GasFees:
    """Returns the fees every transaction of the run is sent with."""
    if gas_config.source == "gas_station":
        async with GasStationClient(gas_config.gas_station_url, tier=gas_config.gas_station_tier) as client:
            fees = await client.get_fees()
    else:
        fees = GasFees(gas_config.max_priority_fee_per_gas, gas_config.max_fee_per_gas)

    _logger.info(f"Using maxPriorityFeePerGas={fees.max_priority_fee_per_gas} maxFeePerGas={fees.max_fee_per_gas}")
    return fees
