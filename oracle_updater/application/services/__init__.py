from .oracle_service import OracleUpdateService
from .price_service import build_price_entries, to_fixed_point, validate
from .tx_builder import build_and_sign

__all__ = ['OracleUpdateService', 'build_and_sign', 'build_price_entries', 'to_fixed_point', 'validate']
