import logging

import httpx
from pydantic import ValidationError

from oracle_updater.domain.exceptions.oracle import RpcError
from oracle_updater.domain.models.account import AccountMeta
from oracle_updater.infrastructure.ledger.schemas import AccountResponse
from oracle_updater.monitoring.logger import EventType, log_event

logger = logging.getLogger(__name__)


def _parse_uint(field_name: str, value: str) -> int:
	if not value.isascii() or not value.isdigit():
		raise RpcError(f'Account {field_name} is not a decimal number: {value!r}')
	return int(value)


class LcdClient:
	"""Client for the ledger's REST (LCD) API."""

	ACCOUNTS_PATH = 'cosmos/auth/v1beta1/accounts'

	def __init__(self, base_url: str, client: httpx.AsyncClient | None = None, timeout: int = 10):
		self.base_url = base_url.rstrip('/')
		self._client = client or httpx.AsyncClient(timeout=timeout)

	async def _request(self, endpoint: str) -> dict:
		url = f'{self.base_url}/{endpoint}'
		try:
			response = await self._client.get(url)
			response.raise_for_status()
			return response.json()
		except httpx.HTTPStatusError as e:
			raise RpcError(
				f'LCD HTTP error {e.response.status_code}: {e.response.text[:200]}'
			) from e
		except httpx.RequestError as e:
			raise RpcError(f'LCD request failed: {e.__class__.__name__}') from e
		except Exception as e:
			raise RpcError(f'LCD response parsing error: {str(e)}') from e

	async def fetch_account_meta(self, address: str) -> AccountMeta:
		data = await self._request(f'{self.ACCOUNTS_PATH}/{address}')

		try:
			account = AccountResponse.model_validate(data).account
		except ValidationError as e:
			raise RpcError(f'Unexpected account response for {address}: {e.error_count()} error(s)') from e

		meta = AccountMeta(
			account_number=_parse_uint('account_number', account.account_number),
			sequence=_parse_uint('sequence', account.sequence),
		)
		log_event(
			logger,
			EventType.ACCOUNT_QUERY,
			f'Account sequence is {meta.sequence}',
			address=address,
			account_number=meta.account_number,
			sequence=meta.sequence,
		)
		return meta

	async def close(self) -> None:
		await self._client.aclose()

	async def __aenter__(self) -> 'LcdClient':
		return self

	async def __aexit__(self, *exc) -> None:
		await self.close()
