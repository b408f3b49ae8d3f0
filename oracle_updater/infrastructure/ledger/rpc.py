import base64
import itertools
import logging

import httpx
from pydantic import ValidationError

from oracle_updater.domain.exceptions.oracle import RpcError
from oracle_updater.domain.models.transaction import CommitResult, SignedTransaction
from oracle_updater.infrastructure.ledger.schemas import BroadcastTxCommitResult
from oracle_updater.monitoring.logger import EventType, log_event

logger = logging.getLogger(__name__)


class CometRpcClient:
	"""
	JSON-RPC client for a CometBFT 0.38 node.

	Only the 0.38 response shape (``check_tx`` / ``tx_result``) is understood;
	older nodes reporting ``deliver_tx`` are rejected as malformed responses.
	"""

	def __init__(self, endpoint: str, client: httpx.AsyncClient | None = None, timeout: int = 60):
		self.endpoint = endpoint
		# broadcast_tx_commit blocks until the next block
		self._client = client or httpx.AsyncClient(timeout=timeout)
		self._ids = itertools.count(1)

	async def _call(self, method: str, params: dict) -> dict:
		payload = {'jsonrpc': '2.0', 'id': next(self._ids), 'method': method, 'params': params}
		try:
			response = await self._client.post(self.endpoint, json=payload)
			response.raise_for_status()
			data = response.json()
		except httpx.HTTPStatusError as e:
			raise RpcError(
				f'RPC HTTP error {e.response.status_code}: {e.response.text[:200]}'
			) from e
		except httpx.RequestError as e:
			raise RpcError(f'RPC request failed: {e.__class__.__name__}') from e
		except Exception as e:
			raise RpcError(f'RPC response parsing error: {str(e)}') from e

		if not isinstance(data, dict):
			raise RpcError('RPC response is not a JSON object')
		if data.get('error'):
			error = data['error']
			detail = (error.get('data') or error.get('message')) if isinstance(error, dict) else error
			raise RpcError(f'RPC {method} failed: {detail}')
		if 'result' not in data:
			raise RpcError(f'RPC {method} returned no result')
		return data['result']

	async def broadcast_commit(self, tx: SignedTransaction) -> CommitResult:
		"""Submit ``tx`` and wait until it is committed in a block (or rejected by CheckTx)."""
		result = await self._call(
			'broadcast_tx_commit', {'tx': base64.b64encode(tx.tx_bytes).decode('ascii')}
		)

		try:
			parsed = BroadcastTxCommitResult.model_validate(result)
		except ValidationError as e:
			raise RpcError(f'Unexpected broadcast_tx_commit result: {e.error_count()} error(s)') from e

		outcome = parsed.check_tx if parsed.check_tx.code != 0 else parsed.tx_result
		commit = CommitResult(
			code=outcome.code,
			log=outcome.log,
			tx_hash=parsed.hash,
			height=parsed.height,
			codespace=outcome.codespace,
			gas_wanted=outcome.gas_wanted,
			gas_used=outcome.gas_used,
			check_tx_code=parsed.check_tx.code,
		)

		log_event(
			logger,
			EventType.BROADCAST,
			f'Transaction {commit.tx_hash} {"committed" if commit.is_success else "failed"} '
			f'at height {commit.height} (code {commit.code})',
			level=logging.INFO if commit.is_success else logging.ERROR,
			tx_hash=commit.tx_hash,
			height=commit.height,
			code=commit.code,
			codespace=commit.codespace,
			check_tx_code=commit.check_tx_code,
			gas_used=commit.gas_used,
		)
		return commit

	async def close(self) -> None:
		await self._client.aclose()

	async def __aenter__(self) -> 'CometRpcClient':
		return self

	async def __aexit__(self, *exc) -> None:
		await self.close()
