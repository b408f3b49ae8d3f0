from dataclasses import dataclass, field


@dataclass(frozen=True)
class SignerIdentity:
	private_key: bytes = field(repr=False)
	public_key: bytes
	address: str


@dataclass(frozen=True)
class AccountMeta:
	account_number: int
	sequence: int
