from pydantic import BaseModel, ConfigDict, Field


class BaseAccount(BaseModel):
	model_config = ConfigDict(extra='ignore')

	address: str | None = None
	account_number: str = Field(..., description='Account number, as a decimal string')
	sequence: str = Field(..., description='Next expected sequence, as a decimal string')


class AccountResponse(BaseModel):
	"""GET /cosmos/auth/v1beta1/accounts/{address}"""

	account: BaseAccount


class ExecTxResult(BaseModel):
	model_config = ConfigDict(extra='ignore')

	code: int = 0
	codespace: str = ''
	log: str = ''
	gas_wanted: int = 0
	gas_used: int = 0


class BroadcastTxCommitResult(BaseModel):
	"""`broadcast_tx_commit` result as returned by CometBFT 0.38."""

	model_config = ConfigDict(extra='ignore')

	check_tx: ExecTxResult
	tx_result: ExecTxResult
	hash: str
	height: int = 0
