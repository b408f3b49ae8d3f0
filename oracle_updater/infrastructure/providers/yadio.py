import logging

import httpx

from oracle_updater.domain.exceptions.oracle import FeedError
from oracle_updater.domain.models.price import FiatCurrency, RateSnapshot

logger = logging.getLogger(__name__)


class YadioProvider:
	BASE_URL = 'https://api.yadio.io/exrates/usd'
	BASE_CURRENCY = 'USD'

	def __init__(self, url: str | None = None, client: httpx.AsyncClient | None = None, timeout: int = 10):
		self.url = url or self.BASE_URL
		self._client = client or httpx.AsyncClient(timeout=timeout)

	@property
	def name(self) -> str:
		return 'yadio'

	async def _request(self) -> dict:
		try:
			response = await self._client.get(self.url)
			response.raise_for_status()
			data = response.json()
		except httpx.HTTPStatusError as e:
			raise FeedError(
				f'Yadio HTTP error {e.response.status_code}: {e.response.text[:200]}'
			) from e
		except httpx.RequestError as e:
			raise FeedError(f'Yadio request failed: {e.__class__.__name__}') from e
		except Exception as e:
			raise FeedError(f'Yadio response parsing error: {str(e)}') from e

		if not isinstance(data, dict):
			raise FeedError('Yadio response is not a JSON object')
		return data

	async def fetch_rates(self) -> RateSnapshot:
		data = await self._request()

		quotes = data.get(self.BASE_CURRENCY)
		if not isinstance(quotes, dict):
			raise FeedError(f'Yadio response has no {self.BASE_CURRENCY} rates')

		rates: dict[FiatCurrency, float] = {}
		for currency in FiatCurrency:
			if currency.value not in quotes:
				logger.debug(f'{currency} missing from {self.name} response, defaulting to 0.0')
				continue
			rates[currency] = self._parse_rate(currency, quotes[currency.value])

		return RateSnapshot(rates)

	@staticmethod
	def _parse_rate(currency: FiatCurrency, value) -> float:
		# bool is an int subclass
		if isinstance(value, bool) or not isinstance(value, (int, float)):
			raise FeedError(f'Malformed rate for {currency}: {value!r}')
		return float(value)

	async def close(self) -> None:
		await self._client.aclose()

	async def __aenter__(self) -> 'YadioProvider':
		return self

	async def __aexit__(self, *exc) -> None:
		await self.close()
