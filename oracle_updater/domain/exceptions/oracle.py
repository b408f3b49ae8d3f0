class OracleUpdaterException(Exception):
	pass


class FeedError(OracleUpdaterException):
	pass


class NoValidPricesError(OracleUpdaterException):
	pass


class KeyDerivationError(OracleUpdaterException):
	pass


class RpcError(OracleUpdaterException):
	pass


class SignError(OracleUpdaterException):
	pass
