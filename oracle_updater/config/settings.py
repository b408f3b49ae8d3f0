from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from oracle_updater.domain.models.transaction import FeeParams


class Settings(BaseSettings):
	# Signer
	ADMIN_SEED: SecretStr
	ADDR_PREFIX: str
	DERIVATION_PATH: str = "m/44'/118'/0'/0/0"

	# Ledger endpoints
	LCD: str
	RPC: str
	PRICE_ADDR: str
	CHAIN_ID: str

	# Fee
	FEE_DENOM: str
	FEE_AMOUNT: int = 15000
	GAS_LIMIT: int = 500_000

	FEED_URL: str = 'https://api.yadio.io/exrates/usd'

	# Logging
	LOG_LEVEL: str = 'INFO'
	LOG_FORMAT: str = 'text'

	model_config = SettingsConfigDict(
		env_file='.env', case_sensitive=False, extra='ignore', frozen=True
	)

	@field_validator('ADMIN_SEED', 'ADDR_PREFIX', 'LCD', 'RPC', 'PRICE_ADDR', 'CHAIN_ID', 'FEE_DENOM')
	@classmethod
	def _not_blank(cls, value):
		raw = value.get_secret_value() if isinstance(value, SecretStr) else value
		if not raw.strip():
			raise ValueError('must not be blank')
		return value

	@field_validator('FEE_AMOUNT', 'GAS_LIMIT')
	@classmethod
	def _positive(cls, value: int) -> int:
		if value <= 0:
			raise ValueError('must be positive')
		return value

	@field_validator('LOG_FORMAT')
	@classmethod
	def _known_format(cls, value: str) -> str:
		value = value.lower()
		if value not in ('text', 'json'):
			raise ValueError("must be 'text' or 'json'")
		return value

	def fee_params(self) -> FeeParams:
		return FeeParams(denom=self.FEE_DENOM, amount=self.FEE_AMOUNT, gas_limit=self.GAS_LIMIT)


def get_settings() -> Settings:
	return Settings()
