import logging
import math
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from oracle_updater.domain.models.price import (
	CurrencyPriceEntry,
	FiatCurrency,
	RateSnapshot,
	RejectedPrice,
	ValidatedPrice,
)
from oracle_updater.monitoring.logger import EventType, log_event

logger = logging.getLogger(__name__)

PRICE_SCALE = 100
MAX_PRICE = 2**64 - 1


def _rejection_reason(rate: float) -> str | None:
	if math.isnan(rate):
		return 'not a number'
	if rate == 0.0:
		return 'zero'
	if rate < 0.0:
		return 'negative'
	if math.isinf(rate):
		return 'non-finite'
	return None


def partition(snapshot: RateSnapshot) -> tuple[list[ValidatedPrice], list[RejectedPrice]]:
	"""Split a snapshot into usable and rejected rates, in FiatCurrency order."""
	accepted: list[ValidatedPrice] = []
	rejected: list[RejectedPrice] = []
	for currency in FiatCurrency:
		rate = snapshot[currency]
		reason = _rejection_reason(rate)
		if reason is None:
			accepted.append(ValidatedPrice(currency=currency, rate=rate))
		else:
			rejected.append(RejectedPrice(currency=currency, rate=rate, reason=reason))
	return accepted, rejected


def validate(snapshot: RateSnapshot) -> list[ValidatedPrice]:
	"""
	Keep only currencies whose rate is strictly positive and finite.

	Each dropped currency is logged with the reason it was dropped. The
	result may be empty; deciding what to do about that is up to the caller.
	"""
	accepted, rejected = partition(snapshot)

	for rejection in rejected:
		log_event(
			logger,
			EventType.PRICE_VALIDATION,
			f'Skipping {rejection.currency} due to {rejection.reason} price',
			level=logging.WARNING,
			currency=rejection.currency.value,
			rate=repr(rejection.rate),
			reason=rejection.reason,
		)

	log_event(
		logger,
		EventType.PRICE_VALIDATION,
		f'Valid prices to post: {len(accepted)}/{len(FiatCurrency)}',
		accepted=[price.currency.value for price in accepted],
	)
	return accepted


def to_fixed_point(rate: float) -> int:
	"""
	Scale a USD rate to the contract's integer price with two implied decimals.

	The product ``rate * 100`` is rounded half away from zero on its exact
	binary value, so ``1.295`` becomes ``130`` and ``0.862166`` becomes ``86``.
	Every currency gets two decimals, whatever its conventional precision.

	Raises:
		ValueError: if the rate is not finite, not positive, or the scaled
			price does not fit in an unsigned 64-bit integer.
	"""
	if not math.isfinite(rate) or rate <= 0.0:
		raise ValueError(f'Cannot convert rate {rate!r} to a fixed-point price')

	product = rate * PRICE_SCALE
	if product > MAX_PRICE:
		raise ValueError(f'Fixed-point price for rate {rate!r} overflows u64')

	return int(Decimal(product).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def build_price_entries(prices: Iterable[ValidatedPrice]) -> list[CurrencyPriceEntry]:
	return [
		CurrencyPriceEntry(currency=price.currency, usd_price=to_fixed_point(price.rate))
		for price in prices
	]
