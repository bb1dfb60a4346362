"""Pydantic model for interspecies.json, the transaction ledger."""

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..errors import ConfigurationError
from ..models.transaction import Transaction, TransactionType


class TransactionRecord(BaseModel):
    """One ledger entry as stored on disk."""

    type: TransactionType
    donor: int = 0
    recipient: int = 0
    value: int = 0
    x: int = 0
    y: int = 0
    z: int = 0
    pn: int = 0
    number_1: int = 0
    name_1: str = ""
    number_2: int = 0
    name_2: str = ""
    number_3: int = 0
    name_3: str = ""

    def to_transaction(self) -> Transaction:
        return Transaction(**self.model_dump())

    @classmethod
    def from_transaction(cls, t: Transaction) -> "TransactionRecord":
        return cls(
            type=t.type,
            donor=t.donor,
            recipient=t.recipient,
            value=t.value,
            x=t.x,
            y=t.y,
            z=t.z,
            pn=t.pn,
            number_1=t.number_1,
            name_1=t.name_1,
            number_2=t.number_2,
            name_2=t.name_2,
            number_3=t.number_3,
            name_3=t.name_3,
        )


_ledger_adapter = TypeAdapter(list[TransactionRecord])


def parse_ledger(data) -> list[Transaction]:
    """Convert decoded interspecies.json content into transactions, in file order.

    Raises:
        ConfigurationError: If an entry is malformed or has an unknown type
    """
    if data is None:
        return []
    try:
        records = _ledger_adapter.validate_python(data)
    except ValidationError as e:
        raise ConfigurationError(f"interspecies ledger: {e}") from e
    return [record.to_transaction() for record in records]


def dump_ledger(transactions: list[Transaction]) -> list[dict]:
    """Convert transactions into JSON-ready dicts."""
    return [
        TransactionRecord.from_transaction(t).model_dump(mode="json") for t in transactions
    ]
