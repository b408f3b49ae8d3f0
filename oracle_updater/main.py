import asyncio
import logging
import sys

from pydantic import ValidationError

from oracle_updater.application.services import OracleUpdateService
from oracle_updater.config.settings import Settings, get_settings
from oracle_updater.domain.exceptions.oracle import NoValidPricesError, OracleUpdaterException
from oracle_updater.infrastructure.ledger import CometRpcClient, LcdClient
from oracle_updater.infrastructure.providers import YadioProvider
from oracle_updater.monitoring.logger import setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NO_VALID_PRICES = 2


def _describe_validation_error(error: ValidationError) -> str:
	# field locations and messages only; input values may hold the seed phrase
	return '; '.join(
		f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in error.errors()
	)


async def run(settings: Settings) -> int:
	"""Run one update cycle and return the process exit code."""
	logger.info('=' * 60)
	logger.info('PRICE ORACLE UPDATE STARTING')
	logger.info(f'Chain: {settings.CHAIN_ID}')
	logger.info(f'Contract: {settings.PRICE_ADDR}')
	logger.info('=' * 60)

	async with (
		YadioProvider(settings.FEED_URL) as provider,
		LcdClient(settings.LCD) as lcd_client,
		CometRpcClient(settings.RPC) as rpc_client,
	):
		service = OracleUpdateService(
			settings=settings,
			provider=provider,
			lcd_client=lcd_client,
			rpc_client=rpc_client,
		)
		try:
			result = await service.run()
		except NoValidPricesError as e:
			logger.error(f'ERROR: {e}')
			return EXIT_NO_VALID_PRICES
		except OracleUpdaterException as e:
			logger.error(f'Oracle update failed: {e.__class__.__name__}: {e}')
			return EXIT_FAILURE

	logger.info(f'res: {result}')
	if not result.is_success:
		logger.warning(f'Ledger rejected the price update with code {result.code} ({result.codespace})')
	return EXIT_OK


def main() -> None:
	try:
		settings = get_settings()
	except ValidationError as e:
		setup_logging()
		logger.error(f'Invalid configuration: {_describe_validation_error(e)}')
		sys.exit(EXIT_FAILURE)

	setup_logging(settings.LOG_LEVEL, json_output=settings.LOG_FORMAT == 'json')
	sys.exit(asyncio.run(run(settings)))


if __name__ == '__main__':
	main()
