"""Domain models for the parts ledger.

These Pydantic models are the shapes exchanged between the record store,
the application services and the TUI. Drafts carry user input and validate
it; the stored models are rebuilt from store rows.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tooltrack.utils import digits_only, new_record_id, parse_iso


class Candidate(BaseModel):
    """One selectable search result shown in a part-name dropdown."""

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(..., description="Id of the record the candidate was built from")
    display_name: str = Field(..., description="Text merged into the form row on confirm")
    secondary_label: str | None = Field(None, description="Extra label, e.g. the part number")
    description: str | None = Field(None, description="Optional detail line")

    def label(self) -> str:
        """Single-line label used by the dropdown."""
        if self.secondary_label:
            return f"{self.display_name} ({self.secondary_label})"
        return self.display_name


class SparePart(BaseModel):
    """A part line inside an entry."""

    id: str = Field(default_factory=new_record_id)
    name: str = ""
    quantity: int = Field(default=0, ge=0)

    @property
    def is_counted(self) -> bool:
        """Only lines with a name and a positive quantity are saved."""
        return bool(self.name.strip()) and self.quantity > 0


class EntryDraft(BaseModel):
    """Parts entry as typed into the entry form."""

    mechanic_name: str
    contact_number: str
    vehicle_number: str
    complaint_type: str
    spare_parts: list[SparePart] = Field(default_factory=list)

    @field_validator("mechanic_name")
    @classmethod
    def _mechanic_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Mechanic name is required")
        return value.strip()

    @field_validator("contact_number")
    @classmethod
    def _contact_is_phone(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Contact number is required")
        if len(digits_only(value)) != 10:
            raise ValueError("Please enter a valid 10-digit phone number")
        return value.strip()

    @field_validator("vehicle_number")
    @classmethod
    def _vehicle_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Vehicle number is required")
        return value.strip().upper()

    @field_validator("complaint_type")
    @classmethod
    def _complaint_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Complaint type is required")
        return value.strip()

    @field_validator("spare_parts")
    @classmethod
    def _keep_counted_parts(cls, value: list[SparePart]) -> list[SparePart]:
        counted = [part for part in value if part.is_counted]
        if not counted:
            raise ValueError("At least one spare part is required")
        return [SparePart(id=part.id, name=part.name.strip(), quantity=part.quantity) for part in counted]

    def to_record(self) -> dict[str, Any]:
        """Row payload for the entries table."""
        return {
            "mechanic_name": self.mechanic_name,
            "contact_number": self.contact_number,
            "vehicle_number": self.vehicle_number,
            "complaint_type": self.complaint_type,
            "spare_parts": [part.model_dump() for part in self.spare_parts],
        }


class Entry(BaseModel):
    """A saved parts entry."""

    id: str
    mechanic_name: str
    contact_number: str
    vehicle_number: str
    complaint_type: str
    spare_parts: list[SparePart] = Field(default_factory=list)
    created_at: datetime

    @classmethod
    def from_record(cls, row: dict[str, Any]) -> "Entry":
        return cls(
            id=row["id"],
            mechanic_name=row["mechanic_name"],
            contact_number=row["contact_number"],
            vehicle_number=row["vehicle_number"],
            complaint_type=row["complaint_type"],
            spare_parts=row.get("spare_parts") or [],
            created_at=parse_iso(row["created_at"]),
        )

    @property
    def total_quantity(self) -> int:
        return sum(part.quantity for part in self.spare_parts)


class ProductDraft(BaseModel):
    """Catalog product as typed into the admin product form."""

    name: str
    part_number: str
    buying_price: float = 0.0
    bought_from: str | None = None

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Product name is required")
        return value.strip()

    @field_validator("part_number")
    @classmethod
    def _part_number_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Part number is required")
        return value.strip()

    @field_validator("buying_price", mode="before")
    @classmethod
    def _parse_price(cls, value: Any) -> float:
        if value is None or (isinstance(value, str) and not value.strip()):
            return 0.0
        try:
            price = float(value)
        except (TypeError, ValueError):
            raise ValueError("Please enter a valid price")
        if price < 0:
            raise ValueError("Please enter a valid price")
        return price

    @field_validator("bought_from")
    @classmethod
    def _blank_supplier_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    def to_record(self) -> dict[str, Any]:
        return self.model_dump()


class Product(BaseModel):
    """A product in the admin catalog."""

    id: str
    name: str
    part_number: str
    buying_price: float = 0.0
    bought_from: str | None = None
    created_at: datetime

    @classmethod
    def from_record(cls, row: dict[str, Any]) -> "Product":
        return cls(
            id=row["id"],
            name=row["name"],
            part_number=row["part_number"],
            buying_price=row.get("buying_price") or 0.0,
            bought_from=row.get("bought_from"),
            created_at=parse_iso(row["created_at"]),
        )

    def to_candidate(self) -> Candidate:
        return Candidate(
            identifier=self.id,
            display_name=self.name,
            secondary_label=self.part_number or None,
            description=f"Bought from {self.bought_from}" if self.bought_from else None,
        )


class Statistics(BaseModel):
    """Dashboard figures for the admin tab."""

    total_entries: int = 0
    unique_mechanics: int = 0
    total_parts: int = 0


def field_errors(exc: ValidationError) -> dict[str, str]:
    """
    Flatten a ValidationError into field -> message.

    Messages raised from our validators come back prefixed with
    "Value error, "; the prefix is stripped so they read as written.
    Only the first error per field is kept.

    Args:
        exc: The validation error raised while building a draft

    Returns:
        Dictionary mapping field names to messages
    """
    errors: dict[str, str] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "__root__"
        message = error["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, message)
    return errors
