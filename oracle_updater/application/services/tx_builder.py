import json
import logging
from collections.abc import Sequence

from cosmpy.protos.cosmos.base.v1beta1.coin_pb2 import Coin
from cosmpy.protos.cosmos.crypto.secp256k1.keys_pb2 import PubKey
from cosmpy.protos.cosmos.tx.signing.v1beta1.signing_pb2 import SignMode
from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import (
	AuthInfo,
	Fee,
	ModeInfo,
	SignDoc,
	SignerInfo,
	TxBody,
	TxRaw,
)
from cosmpy.protos.cosmwasm.wasm.v1.tx_pb2 import MsgExecuteContract
from google.protobuf.any_pb2 import Any as ProtoAny

from oracle_updater.domain.exceptions.oracle import SignError
from oracle_updater.domain.models.account import AccountMeta, SignerIdentity
from oracle_updater.domain.models.price import CurrencyPriceEntry
from oracle_updater.domain.models.transaction import FeeParams, SignedTransaction
from oracle_updater.infrastructure.crypto.keys import sign_bytes, validate_address
from oracle_updater.monitoring.logger import EventType, log_event

logger = logging.getLogger(__name__)

EXECUTE_CONTRACT_TYPE_URL = '/cosmwasm.wasm.v1.MsgExecuteContract'
SECP256K1_PUBKEY_TYPE_URL = '/cosmos.crypto.secp256k1.PubKey'


def _serialize(message) -> bytes:
	return message.SerializeToString(deterministic=True)


def build_execute_msg(entries: Sequence[CurrencyPriceEntry]) -> bytes:
	"""Encode the price contract's ``update_prices`` execute message as compact JSON."""
	message = {'update_prices': [entry.to_message() for entry in entries]}
	return json.dumps(message, separators=(',', ':')).encode('utf-8')


def build_tx_body(msg: bytes, sender: str, contract: str, memo: str = '') -> TxBody:
	execute = MsgExecuteContract(sender=sender, contract=contract, msg=msg)
	return TxBody(
		messages=[ProtoAny(type_url=EXECUTE_CONTRACT_TYPE_URL, value=_serialize(execute))],
		memo=memo,
	)


def build_auth_info(public_key: bytes, sequence: int, fee_params: FeeParams) -> AuthInfo:
	signer_info = SignerInfo(
		public_key=ProtoAny(type_url=SECP256K1_PUBKEY_TYPE_URL, value=_serialize(PubKey(key=public_key))),
		mode_info=ModeInfo(single=ModeInfo.Single(mode=SignMode.SIGN_MODE_DIRECT)),
		sequence=sequence,
	)
	fee = Fee(
		amount=[Coin(denom=fee_params.denom, amount=str(fee_params.amount))],
		gas_limit=fee_params.gas_limit,
	)
	return AuthInfo(signer_infos=[signer_info], fee=fee)


def build_sign_doc(body_bytes: bytes, auth_info_bytes: bytes, chain_id: str, account_number: int) -> bytes:
	"""Canonical SIGN_MODE_DIRECT document bytes; identical inputs give identical bytes."""
	sign_doc = SignDoc(
		body_bytes=body_bytes,
		auth_info_bytes=auth_info_bytes,
		chain_id=chain_id,
		account_number=account_number,
	)
	return _serialize(sign_doc)


def build_and_sign(
	entries: Sequence[CurrencyPriceEntry],
	identity: SignerIdentity,
	meta: AccountMeta,
	contract_addr: str,
	chain_id: str,
	fee_params: FeeParams,
) -> SignedTransaction:
	if not entries:
		raise SignError('Refusing to build a transaction without prices')

	try:
		# contract and sender share the bech32 prefix (everything before the last '1')
		validate_address(contract_addr, identity.address[: identity.address.rfind('1')])
		msg = build_execute_msg(entries)
		log_event(logger, EventType.TX_BUILD, f'update_msg: {msg.decode("utf-8")}', entries=len(entries))

		body_bytes = _serialize(build_tx_body(msg, sender=identity.address, contract=contract_addr))
		auth_info_bytes = _serialize(build_auth_info(identity.public_key, meta.sequence, fee_params))
		sign_doc = build_sign_doc(body_bytes, auth_info_bytes, chain_id, meta.account_number)

		signature = sign_bytes(identity.private_key, sign_doc)
		tx_bytes = _serialize(
			TxRaw(body_bytes=body_bytes, auth_info_bytes=auth_info_bytes, signatures=[signature])
		)
	except Exception as e:
		raise SignError(f'Failed to build signed transaction: {e.__class__.__name__}: {e}') from e

	log_event(
		logger,
		EventType.TX_BUILD,
		f'Signed transaction for {contract_addr} on {chain_id}',
		sender=identity.address,
		contract=contract_addr,
		chain_id=chain_id,
		account_number=meta.account_number,
		sequence=meta.sequence,
		tx_size=len(tx_bytes),
	)
	return SignedTransaction(
		body_bytes=body_bytes,
		auth_info_bytes=auth_info_bytes,
		signature=signature,
		tx_bytes=tx_bytes,
	)
