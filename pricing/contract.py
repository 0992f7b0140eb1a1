"""
On-chain price reader.

Reads the sale contract's ``currentPrice()`` accessor through web3 and
converts the wei value into ether.
"""

from decimal import Decimal

import structlog
from starlette.concurrency import run_in_threadpool
from web3 import Web3

from core.logging import BusinessEvents
from core.settings import Settings

log = structlog.get_logger(__name__)

CURRENT_PRICE_ABI = [
    {
        "inputs": [],
        "name": "currentPrice",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    }
]


class ContractReadError(Exception):
    pass


class ContractReader:
    def __init__(self, settings: Settings, abi: list[dict] | None = None):
        self.provider_url = settings.eth_provider_url
        self.network = settings.ETH_NETWORK
        self.address = settings.CONTRACT_ADDRESS
        self.abi = abi or CURRENT_PRICE_ABI

    def _read_wei(self) -> int:
        if not self.provider_url:
            raise ContractReadError("no blockchain provider configured")
        if not self.address:
            raise ContractReadError("no contract address configured")

        web3 = Web3(Web3.HTTPProvider(self.provider_url))
        contract = web3.eth.contract(
            address=Web3.to_checksum_address(self.address), abi=self.abi
        )
        return contract.functions.currentPrice().call()

    async def current_price(self) -> Decimal:
        """Current contract price in ether."""
        try:
            wei = await run_in_threadpool(self._read_wei)
            return Decimal(Web3.from_wei(wei, "ether"))
        except ContractReadError as e:
            log.error(BusinessEvents.CONTRACT_READ_FAILED, error=str(e))
            raise
        except Exception as e:
            log.error(
                BusinessEvents.CONTRACT_READ_FAILED,
                network=self.network,
                address=self.address,
                error=str(e),
            )
            raise ContractReadError(str(e)) from e
