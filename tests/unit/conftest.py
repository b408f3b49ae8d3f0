"""
Shared fixtures for unit tests.
"""

import pytest
from bip_utils import Bech32Encoder

from oracle_updater.config.settings import Settings
from oracle_updater.domain.models.account import AccountMeta
from oracle_updater.domain.models.transaction import FeeParams
from oracle_updater.infrastructure.crypto.keys import resolve_identity

TEST_MNEMONIC = (
	'abandon abandon abandon abandon abandon abandon '
	'abandon abandon abandon abandon abandon about'
)
TEST_PREFIX = 'cosmos'
TEST_PATH = "m/44'/118'/0'/0/0"
TEST_CHAIN_ID = 'localmoney-testnet-1'

# 32-byte contract address, as CosmWasm instantiates them
TEST_CONTRACT = Bech32Encoder.Encode(TEST_PREFIX, bytes(range(32)))


@pytest.fixture
def identity():
	return resolve_identity(TEST_MNEMONIC, TEST_PATH, TEST_PREFIX)


@pytest.fixture
def account_meta():
	return AccountMeta(account_number=42, sequence=7)


@pytest.fixture
def fee_params():
	return FeeParams(denom='uatom', amount=15000, gas_limit=500_000)


@pytest.fixture
def settings():
	return Settings(
		_env_file=None,
		ADMIN_SEED=TEST_MNEMONIC,
		ADDR_PREFIX=TEST_PREFIX,
		LCD='https://lcd.example.com/',
		RPC='https://rpc.example.com',
		PRICE_ADDR=TEST_CONTRACT,
		CHAIN_ID=TEST_CHAIN_ID,
		FEE_DENOM='uatom',
	)
