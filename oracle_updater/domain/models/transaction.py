from dataclasses import dataclass


@dataclass(frozen=True)
class FeeParams:
	denom: str
	amount: int
	gas_limit: int


@dataclass(frozen=True)
class SignedTransaction:
	body_bytes: bytes
	auth_info_bytes: bytes
	signature: bytes
	tx_bytes: bytes  # TxRaw encoding, submitted as-is


@dataclass(frozen=True)
class CommitResult:
	"""Outcome of a broadcast_tx_commit call.

	When CheckTx rejected the transaction, code/log come from CheckTx and
	height is 0; otherwise they come from the block execution result.
	"""

	code: int
	log: str
	tx_hash: str
	height: int
	codespace: str = ''
	gas_wanted: int = 0
	gas_used: int = 0
	check_tx_code: int = 0

	@property
	def is_success(self) -> bool:
		return self.code == 0 and self.check_tx_code == 0
