import logging
from unittest.mock import AsyncMock, patch

import pytest

from oracle_updater import main as entrypoint
from oracle_updater.config.settings import Settings
from oracle_updater.domain.exceptions.oracle import FeedError, RpcError, SignError
from oracle_updater.domain.models.account import AccountMeta
from oracle_updater.domain.models.price import RateSnapshot
from oracle_updater.domain.models.transaction import CommitResult
from oracle_updater.infrastructure.ledger.lcd import LcdClient
from oracle_updater.infrastructure.ledger.rpc import CometRpcClient
from oracle_updater.infrastructure.providers.yadio import YadioProvider


def as_context_manager(mock):
	mock.__aenter__.return_value = mock
	mock.__aexit__.return_value = False
	return mock


@pytest.fixture
def clients():
	provider = as_context_manager(AsyncMock(spec=YadioProvider))
	provider.name = 'yadio'
	provider.fetch_rates.return_value = RateSnapshot({'EUR': 0.85, 'GBP': 0.75, 'SGD': 1.30})

	lcd = as_context_manager(AsyncMock(spec=LcdClient))
	lcd.fetch_account_meta.return_value = AccountMeta(account_number=42, sequence=7)

	rpc = as_context_manager(AsyncMock(spec=CometRpcClient))
	rpc.broadcast_commit.return_value = CommitResult(code=0, log='[]', tx_hash='ABCDEF', height=100)

	with (
		patch('oracle_updater.main.YadioProvider', return_value=provider) as provider_cls,
		patch('oracle_updater.main.LcdClient', return_value=lcd) as lcd_cls,
		patch('oracle_updater.main.CometRpcClient', return_value=rpc) as rpc_cls,
	):
		yield {
			'provider': provider,
			'lcd': lcd,
			'rpc': rpc,
			'provider_cls': provider_cls,
			'lcd_cls': lcd_cls,
			'rpc_cls': rpc_cls,
		}


class TestRun:
	@pytest.mark.asyncio
	async def test_successful_broadcast_exits_zero(self, settings, clients):
		assert await entrypoint.run(settings) == entrypoint.EXIT_OK

		clients['provider_cls'].assert_called_once_with(settings.FEED_URL)
		clients['lcd_cls'].assert_called_once_with(settings.LCD)
		clients['rpc_cls'].assert_called_once_with(settings.RPC)
		clients['rpc'].broadcast_commit.assert_awaited_once()

	@pytest.mark.asyncio
	async def test_ledger_rejection_still_exits_zero(self, settings, clients):
		clients['rpc'].broadcast_commit.return_value = CommitResult(
			code=5, log='unauthorized', tx_hash='ABCDEF', height=100, codespace='wasm'
		)

		assert await entrypoint.run(settings) == entrypoint.EXIT_OK

	@pytest.mark.asyncio
	async def test_feed_failure_exits_with_no_valid_prices_and_no_ledger_calls(self, settings, clients):
		clients['provider'].fetch_rates.side_effect = FeedError('Yadio request failed: ConnectError')

		assert await entrypoint.run(settings) == entrypoint.EXIT_NO_VALID_PRICES

		clients['lcd'].fetch_account_meta.assert_not_called()
		clients['rpc'].broadcast_commit.assert_not_called()

	@pytest.mark.asyncio
	async def test_all_zero_prices_exit_code_is_distinct(self, settings, clients):
		clients['provider'].fetch_rates.return_value = RateSnapshot.empty()

		code = await entrypoint.run(settings)

		assert code == entrypoint.EXIT_NO_VALID_PRICES
		assert code not in (entrypoint.EXIT_OK, entrypoint.EXIT_FAILURE)

	@pytest.mark.asyncio
	@pytest.mark.parametrize(
		'target, error',
		[
			('lcd', RpcError('LCD request failed: ConnectError')),
			('rpc', RpcError('RPC request failed: ReadTimeout')),
		],
	)
	async def test_fatal_errors_exit_one(self, settings, clients, target, error):
		method = 'fetch_account_meta' if target == 'lcd' else 'broadcast_commit'
		getattr(clients[target], method).side_effect = error

		assert await entrypoint.run(settings) == entrypoint.EXIT_FAILURE

	@pytest.mark.asyncio
	async def test_sign_error_exits_one(self, settings, clients):
		with patch(
			'oracle_updater.application.services.oracle_service.build_and_sign',
			side_effect=SignError('Failed to build signed transaction'),
		):
			assert await entrypoint.run(settings) == entrypoint.EXIT_FAILURE

		clients['rpc'].broadcast_commit.assert_not_called()

	@pytest.mark.asyncio
	async def test_clients_are_closed(self, settings, clients):
		clients['provider'].fetch_rates.return_value = RateSnapshot.empty()

		await entrypoint.run(settings)

		for name in ('provider', 'lcd', 'rpc'):
			clients[name].__aexit__.assert_awaited_once()


class TestMain:
	def test_invalid_configuration_exits_one_without_leaking_seed(self, monkeypatch, caplog):
		seed = 'abandon abandon abandon abandon abandon abandon abandon abandon abandon abandon abandon about'
		monkeypatch.setenv('ADMIN_SEED', seed)
		for key in ('ADDR_PREFIX', 'LCD', 'RPC', 'PRICE_ADDR', 'CHAIN_ID', 'FEE_DENOM'):
			monkeypatch.delenv(key, raising=False)

		with (
			patch('oracle_updater.main.get_settings', lambda: Settings(_env_file=None)),
			patch('oracle_updater.main.setup_logging'),
			caplog.at_level(logging.ERROR),
			pytest.raises(SystemExit) as exc_info,
		):
			entrypoint.main()

		assert exc_info.value.code == entrypoint.EXIT_FAILURE
		assert 'Invalid configuration' in caplog.text
		assert 'LCD: Field required' in caplog.text
		assert seed not in caplog.text

	def test_exit_code_comes_from_run(self, settings):
		async def fake_run(_settings):
			assert _settings is settings
			return entrypoint.EXIT_NO_VALID_PRICES

		with (
			patch('oracle_updater.main.get_settings', return_value=settings),
			patch('oracle_updater.main.setup_logging') as setup_logging,
			patch('oracle_updater.main.run', fake_run),
			pytest.raises(SystemExit) as exc_info,
		):
			entrypoint.main()

		assert exc_info.value.code == entrypoint.EXIT_NO_VALID_PRICES
		setup_logging.assert_called_once_with('INFO', json_output=False)
