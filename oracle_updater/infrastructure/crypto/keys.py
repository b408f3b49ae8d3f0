"""
secp256k1 key handling for the oracle signer.

Keys are derived from a BIP-39 mnemonic along a BIP-32 path and addressed the
Cosmos way: bech32(prefix, ripemd160(sha256(compressed_pubkey))).
"""

import hashlib

from bip_utils import (
	AtomAddrEncoder,
	Bech32Decoder,
	Bip32Secp256k1,
	Bip39MnemonicValidator,
	Bip39SeedGenerator,
)
from ecdsa import BadSignatureError, SECP256k1, SigningKey, VerifyingKey
from ecdsa.util import sigdecode_string, sigencode_string_canonize

from oracle_updater.domain.exceptions.oracle import KeyDerivationError
from oracle_updater.domain.models.account import SignerIdentity

DEFAULT_DERIVATION_PATH = "m/44'/118'/0'/0/0"


def resolve_identity(
	seed_phrase: str, derivation_path: str = DEFAULT_DERIVATION_PATH, address_prefix: str = 'cosmos'
) -> SignerIdentity:
	"""Derive the signer's keys and address. The same inputs always give the same identity."""
	mnemonic = ' '.join(seed_phrase.split())
	if not Bip39MnemonicValidator().IsValid(mnemonic):
		# the phrase itself is never echoed back
		raise KeyDerivationError('Seed phrase is not a valid BIP-39 mnemonic')

	try:
		seed = Bip39SeedGenerator(mnemonic).Generate('')
		node = Bip32Secp256k1.FromSeed(seed).DerivePath(derivation_path)
		private_key = node.PrivateKey().Raw().ToBytes()
		public_key = node.PublicKey().RawCompressed().ToBytes()
		address = AtomAddrEncoder.EncodeKey(public_key, hrp=address_prefix)
	except Exception as e:
		raise KeyDerivationError(
			f'Key derivation failed for path {derivation_path}: {e.__class__.__name__}'
		) from e

	return SignerIdentity(private_key=private_key, public_key=public_key, address=address)


def validate_address(address: str, prefix: str) -> str:
	"""Check that ``address`` is a bech32 address with the given prefix."""
	try:
		Bech32Decoder.Decode(prefix, address)
	except Exception as e:
		raise ValueError(f'{address!r} is not a valid {prefix} address') from e
	return address


def sign_bytes(private_key: bytes, message: bytes) -> bytes:
	"""
	Sign SHA-256(message) and return the 64-byte r||s signature.

	The nonce follows RFC 6979 and s is normalized to the lower half of the
	curve order, as Cosmos SDK nodes require.
	"""
	signing_key = SigningKey.from_string(private_key, curve=SECP256k1, hashfunc=hashlib.sha256)
	return signing_key.sign_deterministic(
		message, hashfunc=hashlib.sha256, sigencode=sigencode_string_canonize
	)


def verify_signature(public_key: bytes, message: bytes, signature: bytes) -> bool:
	verifying_key = VerifyingKey.from_string(public_key, curve=SECP256k1, hashfunc=hashlib.sha256)
	try:
		return verifying_key.verify(
			signature, message, hashfunc=hashlib.sha256, sigdecode=sigdecode_string
		)
	except BadSignatureError:
		return False
