"""Pydantic models for the dashboard filter selection."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Qualification(str, Enum):
    BSC = "BSC"
    BCOM = "BCom"
    BA = "BA"


class Sector(str, Enum):
    IT = "IT"
    FINANCE = "Finance"
    RETAIL = "Retail"
    LOGISTICS = "Logistics"


class LocationTier(str, Enum):
    TIER_1 = "Tier 1 (Metros)"
    TIER_2 = "Tier 2"
    TIER_3 = "Tier 3"
    TIER_4 = "Tier 4"


class JobRole(str, Enum):
    # BPO / IT
    CUSTOMER_SUPPORT_EXECUTIVE = "Customer Support Executive"
    TECHNICAL_SUPPORT_REPRESENTATIVE = "Technical Support Representative"
    TELECALLER = "Telecaller"
    CHAT_PROCESS_EXECUTIVE = "Chat Process Executive"
    DATA_ENTRY_OPERATOR = "Data Entry Operator"
    PROCESS_ASSOCIATE = "Process Associate"
    # Banking
    BANK_TELLER = "Bank Teller"
    LOAN_OFFICER = "Loan Officer"
    RELATIONSHIP_MANAGER = "Relationship Manager (Entry-Level)"
    KYC_ANALYST = "KYC Analyst"
    # Fintech
    OPERATIONS_ANALYST = "Operations Analyst (Fintech)"
    PAYMENT_SUPPORT_SPECIALIST = "Payment Support Specialist"
    FRAUD_ANALYST = "Fraud Analyst"
    # Logistics
    LOGISTICS_COORDINATOR = "Logistics Coordinator"
    SUPPLY_CHAIN_EXECUTIVE = "Supply Chain Executive"
    WAREHOUSE_SUPERVISOR = "Warehouse Supervisor"
    DELIVERY_ASSOCIATE = "Delivery Associate"


# dimension -> (enum type, UI label, "All" sentinel label)
DIMENSIONS: dict[str, tuple[type[Enum], str, str]] = {
    "qualification": (Qualification, "Qualification", "All Degrees"),
    "sector": (Sector, "Sector", "All Sectors"),
    "location": (LocationTier, "Location Tier", "All Tiers"),
    "job_role": (JobRole, "Job Role", "All Roles"),
}


def _parse_dimension(dimension: str, value: Enum | str | None) -> Enum | None:
    """Map a UI label or enum member onto the dimension's enum, or None for "All"."""
    if dimension not in DIMENSIONS:
        raise ValueError(f"Unknown filter dimension: {dimension!r}")
    enum_cls, _, sentinel = DIMENSIONS[dimension]
    if value is None or value == sentinel:
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError(
            f"{value!r} is not a valid {dimension} option"
        ) from None


def filter_options(dimension: str) -> list[str]:
    """Return the option labels for a dropdown, "All" sentinel first."""
    if dimension not in DIMENSIONS:
        raise ValueError(f"Unknown filter dimension: {dimension!r}")
    enum_cls, _, sentinel = DIMENSIONS[dimension]
    values = [member.value for member in enum_cls]
    if enum_cls is JobRole:
        values = sorted(values)
    return [sentinel, *values]


class Filters(BaseModel):
    """The user's filter selection. ``None`` on a dimension means no constraint."""

    model_config = ConfigDict(frozen=True)

    qualification: Qualification | None = None
    sector: Sector | None = None
    location: LocationTier | None = None
    job_role: JobRole | None = None

    @classmethod
    def from_labels(cls, **labels: str | None) -> Filters:
        """Build filters from dropdown labels, mapping "All ..." sentinels to None."""
        parsed = {name: _parse_dimension(name, value) for name, value in labels.items()}
        return cls(**parsed)

    def with_value(self, dimension: str, value: Enum | str | None) -> Filters:
        """Return a copy with one dimension replaced."""
        parsed = _parse_dimension(dimension, value)
        return self.model_copy(update={dimension: parsed})

    def constraints(self) -> dict[str, str]:
        """Constrained dimensions only, in declaration order."""
        result: dict[str, str] = {}
        for name in DIMENSIONS:
            value = getattr(self, name)
            if value is not None:
                result[name] = value.value
        return result

    def label(self, dimension: str) -> str:
        """The dropdown label currently selected for ``dimension``."""
        value = getattr(self, dimension)
        if value is None:
            return DIMENSIONS[dimension][2]
        return value.value

    @property
    def is_unconstrained(self) -> bool:
        return not self.constraints()
