"""
Pydantic schema for a clinic bill. Used by providers, store, filters and invoice rendering.
Wire format is camelCase JSON; attributes are snake_case.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


CHARGE_TYPES = ("Consultation", "Delivery")
BILL_STATUSES = ("Pending", "Paid", "Overdue")
DEFAULT_CHARGE_TYPE = "Consultation"
SERVER_DEFAULT_CHARGE_TYPE = "Other"
DEFAULT_STATUS = "Pending"
DEFAULT_ADDRESS = "Mainpuri"


# ---------------------------------------------------------------------------
# Bill
# ---------------------------------------------------------------------------


class Bill(BaseModel):
    """One patient charge as stored by the backend."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    mongo_id: str | None = Field(default=None, alias="_id")
    id: str | None = None
    serial_number: int | None = None
    patient_name: str = ""
    guardian_name: str | None = None
    phone: str | None = None
    address: str = DEFAULT_ADDRESS
    bill_date: str = ""
    charge_type: str = DEFAULT_CHARGE_TYPE
    status: str = DEFAULT_STATUS
    amount: float = 0.0

    @field_validator("mongo_id", "id", mode="before")
    @classmethod
    def stringify_identifier(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        return str(v)

    @field_validator("phone", "guardian_name", mode="before")
    @classmethod
    def stringify_optional_text(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        return str(v).strip()

    @field_validator("patient_name", mode="before")
    @classmethod
    def stringify_patient_name(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("serial_number", mode="before")
    @classmethod
    def coerce_serial(cls, v: Any) -> int | None:
        if v is None or v == "":
            return None
        try:
            return int(str(v).strip())
        except ValueError:
            return None

    @field_validator("bill_date", mode="before")
    @classmethod
    def normalize_bill_date(cls, v: Any) -> str:
        if v is None or v == "":
            return ""
        if isinstance(v, (date, datetime)):
            return v.isoformat()
        return str(v).strip()

    @property
    def key(self) -> str | None:
        """Server id once assigned, else the client placeholder."""
        return self.mongo_id or self.id


def bill_key(bill: Bill | Mapping[str, Any]) -> str | None:
    """Identifier of a Bill or raw bill dict; `_id` wins over `id`."""
    if isinstance(bill, Bill):
        return bill.key
    ident = bill.get("_id") or bill.get("id")
    return str(ident) if ident not in (None, "") else None


def to_bill(data: Bill | Mapping[str, Any]) -> Bill:
    if isinstance(data, Bill):
        return data
    return Bill.model_validate(dict(data))
