import json
import logging

from oracle_updater.application.services.price_service import build_price_entries, validate
from oracle_updater.application.services.tx_builder import build_and_sign
from oracle_updater.config.settings import Settings
from oracle_updater.domain.exceptions.oracle import FeedError, NoValidPricesError
from oracle_updater.domain.models.price import RateSnapshot
from oracle_updater.domain.models.transaction import CommitResult
from oracle_updater.infrastructure.crypto.keys import resolve_identity
from oracle_updater.infrastructure.ledger.lcd import LcdClient
from oracle_updater.infrastructure.ledger.rpc import CometRpcClient
from oracle_updater.infrastructure.providers.yadio import YadioProvider
from oracle_updater.monitoring.logger import EventType, log_event

logger = logging.getLogger(__name__)


class OracleUpdateService:
	"""
	Runs one fetch -> validate -> convert -> sign -> broadcast cycle.

	Each stage consumes the previous stage's result; nothing is retried.
	A feed failure is downgraded to an all-zero snapshot, which the
	validator then turns into NoValidPricesError before the ledger is
	contacted. Every other failure propagates to the caller.
	"""

	def __init__(
		self,
		settings: Settings,
		provider: YadioProvider,
		lcd_client: LcdClient,
		rpc_client: CometRpcClient,
	):
		self.settings = settings
		self.provider = provider
		self.lcd_client = lcd_client
		self.rpc_client = rpc_client

	async def _fetch_snapshot(self) -> RateSnapshot:
		try:
			snapshot = await self.provider.fetch_rates()
		except FeedError as e:
			log_event(
				logger,
				EventType.PRICE_FEED,
				f'Price feed {self.provider.name} failed, using empty snapshot: {e}',
				level=logging.WARNING,
				provider=self.provider.name,
				error=str(e),
			)
			return RateSnapshot.empty()

		log_event(
			logger,
			EventType.PRICE_FEED,
			f'Fetched rates from {self.provider.name}',
			provider=self.provider.name,
			rates={currency.value: rate for currency, rate in snapshot.items()},
		)
		return snapshot

	async def run(self) -> CommitResult:
		snapshot = await self._fetch_snapshot()

		validated = validate(snapshot)
		if not validated:
			raise NoValidPricesError(
				'No valid prices available. Aborting transaction to prevent posting invalid data.'
			)

		entries = build_price_entries(validated)
		prices_json = json.dumps([[price.rate, price.currency.value] for price in validated])
		logger.info(f'prices: {prices_json}')

		identity = resolve_identity(
			self.settings.ADMIN_SEED.get_secret_value(),
			self.settings.DERIVATION_PATH,
			self.settings.ADDR_PREFIX,
		)
		logger.info(f'Signer address is {identity.address}')

		meta = await self.lcd_client.fetch_account_meta(identity.address)

		tx = build_and_sign(
			entries,
			identity,
			meta,
			contract_addr=self.settings.PRICE_ADDR,
			chain_id=self.settings.CHAIN_ID,
			fee_params=self.settings.fee_params(),
		)

		result = await self.rpc_client.broadcast_commit(tx)
		logger.info(result.log)
		return result
