import json
import logging
import sys
import traceback
from dataclasses import asdict, dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any


class CustomJSONEncoder(json.JSONEncoder):
	def default(self, o):
		if isinstance(o, datetime):
			return o.isoformat()
		if isinstance(o, Decimal):
			return str(o)
		if isinstance(o, Enum):
			return o.value
		if isinstance(o, bytes):
			return o.hex()
		return super().default(o)


class JSONFormatter(logging.Formatter):
	"""
	Custom formatter that outputs structured JSON logs.
	"""

	def format(self, record: logging.LogRecord) -> str:
		log_entry = {
			'timestamp': datetime.now().isoformat(),
			'level': record.levelname,
			'logger': record.name,
			'message': record.getMessage(),
			'module': record.module,
			'function': record.funcName,
			'line': record.lineno,
		}

		if record.exc_info:
			log_entry['exception'] = {
				'type': record.exc_info[0].__name__,
				'message': str(record.exc_info[1]),
				'traceback': traceback.format_exception(*record.exc_info),
			}

		if hasattr(record, 'extra_data'):
			log_entry['data'] = record.extra_data

		return json.dumps(log_entry, ensure_ascii=False, cls=CustomJSONEncoder)


CONSOLE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s'


def setup_logging(level: str = 'INFO', json_output: bool = False) -> None:
	"""Configure the root logger to write to stdout. Nothing is written to disk."""
	root_logger = logging.getLogger()
	root_logger.handlers.clear()
	root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

	logging.getLogger('httpx').setLevel(logging.WARNING)
	logging.getLogger('httpcore').setLevel(logging.WARNING)

	console_handler = logging.StreamHandler(sys.stdout)
	if json_output:
		console_handler.setFormatter(JSONFormatter())
	else:
		console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
	root_logger.addHandler(console_handler)


class EventType(Enum):
	PRICE_FEED = 'price_feed'
	PRICE_VALIDATION = 'price_validation'
	ACCOUNT_QUERY = 'account_query'
	TX_BUILD = 'tx_build'
	BROADCAST = 'broadcast'


@dataclass
class LogEvent:
	event_type: EventType
	message: str
	timestamp: datetime
	context: dict[str, Any] | None = None

	def to_dict(self) -> dict[str, Any]:
		data = asdict(self)
		data['timestamp'] = self.timestamp.isoformat()
		data['event_type'] = self.event_type.value
		return data


def log_event(
	logger: logging.Logger,
	event_type: EventType,
	message: str,
	level: int = logging.INFO,
	**context: Any,
) -> None:
	"""Log a pipeline event, attaching its context as structured data."""
	event = LogEvent(
		event_type=event_type,
		message=message,
		timestamp=datetime.now(),
		context=context or None,
	)
	logger.log(level, message, extra={'extra_data': event.to_dict()})
