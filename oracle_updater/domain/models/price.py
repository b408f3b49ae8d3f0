from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class FiatCurrency(str, Enum):
	"""Fiat currencies accepted by the price contract, in posting order."""

	ARS = 'ARS'
	BRL = 'BRL'
	CAD = 'CAD'
	CLP = 'CLP'
	COP = 'COP'
	EUR = 'EUR'
	GBP = 'GBP'
	IDR = 'IDR'
	MXN = 'MXN'
	MYR = 'MYR'
	NGN = 'NGN'
	PHP = 'PHP'
	SGD = 'SGD'
	THB = 'THB'
	VES = 'VES'
	VND = 'VND'

	def __str__(self) -> str:
		return self.value


@dataclass(frozen=True)
class RateSnapshot(Mapping):
	"""USD rates for every supported currency, as returned by the feed.

	Currencies the feed did not report hold 0.0.
	"""

	rates: Mapping[FiatCurrency, float] = field(default_factory=dict)

	def __post_init__(self):
		full = {currency: 0.0 for currency in FiatCurrency}
		for currency, rate in self.rates.items():
			full[FiatCurrency(currency)] = float(rate)
		object.__setattr__(self, 'rates', MappingProxyType(full))

	@classmethod
	def empty(cls) -> 'RateSnapshot':
		return cls()

	def __getitem__(self, currency: FiatCurrency) -> float:
		return self.rates[FiatCurrency(currency)]

	def __iter__(self) -> Iterator[FiatCurrency]:
		return iter(self.rates)

	def __len__(self) -> int:
		return len(self.rates)


@dataclass(frozen=True)
class ValidatedPrice:
	currency: FiatCurrency
	rate: float


@dataclass(frozen=True)
class RejectedPrice:
	currency: FiatCurrency
	rate: float
	reason: str


@dataclass(frozen=True)
class CurrencyPriceEntry:
	currency: FiatCurrency
	usd_price: int
	updated_at: int = 0  # protocol placeholder, not wall-clock time

	def to_message(self) -> dict:
		return {
			'currency': self.currency.value,
			'usd_price': str(self.usd_price),
			'updated_at': self.updated_at,
		}
