"""
Household and Finance Record Models

These models describe the entities the app stores under each section key.
Records vary by their `type` field, so each family is a discriminated union
over a shared base shape.

DESIGN DECISION: Every model allows extra fields. Records written by older
app versions carry fields we do not know about, and a backup must never
lose them. The backup validator does not use these models at all (it walks
raw JSON); they are used to describe a backup to the user.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt


RecordId = Union[int, float, str]


class RecordType(str, Enum):
    """Kinds of household records in the history section."""
    BILL = "bill"
    WARRANTY = "warranty"
    DOCUMENT = "doc"


class TransactionType(str, Enum):
    """Direction of a finance transaction."""
    INCOME = "income"
    EXPENSE = "expense"


# =============================================================================
# HOME RECORDS
# =============================================================================

class HomeRecordBase(BaseModel):
    """Fields shared by every household record."""
    model_config = ConfigDict(extra="allow")

    id: RecordId
    date: Optional[str] = None
    homeId: Optional[RecordId] = None
    cost: Optional[Union[float, str]] = None
    description: Optional[str] = None
    image: Optional[str] = None


class BillRecord(HomeRecordBase):
    """A paid or pending utility bill."""
    type: Literal["bill"]
    subType: Optional[str] = Field(
        default=None,
        description="Utility kind (electricity, water, gas...)"
    )


class WarrantyRecord(HomeRecordBase):
    """A product warranty."""
    type: Literal["warranty"]
    productName: Optional[str] = None
    endDate: Optional[str] = None


class DocumentRecord(HomeRecordBase):
    """An official document (deed, rental contract, insurance...)."""
    type: Literal["doc"]
    subType: Optional[str] = None


HomeRecord = Annotated[
    Union[BillRecord, WarrantyRecord, DocumentRecord],
    Field(discriminator="type"),
]


class HomeProfile(BaseModel):
    """
    A home the user tracks records for.

    Homes are created with numeric timestamp ids, so the id is strictly
    numeric here (a numeric string is not accepted).
    """
    model_config = ConfigDict(extra="allow")

    id: Union[StrictInt, StrictFloat]
    title: Optional[str] = None
    address: Optional[str] = None
    ownerName: Optional[str] = None
    homeImage: Optional[str] = None
    themeColor: Optional[str] = None


# =============================================================================
# FINANCE RECORDS
# =============================================================================

class TransactionBase(BaseModel):
    """Fields shared by income and expense transactions."""
    model_config = ConfigDict(extra="allow")

    id: RecordId
    amount: Optional[Union[StrictInt, StrictFloat]] = None
    category: Optional[str] = None
    date: Optional[str] = None
    status: Optional[str] = None
    homeId: Optional[RecordId] = None
    isRecurring: Optional[bool] = None
    createdAt: Optional[str] = None


class IncomeTransaction(TransactionBase):
    type: Literal["income"]


class ExpenseTransaction(TransactionBase):
    type: Literal["expense"]


Transaction = Annotated[
    Union[IncomeTransaction, ExpenseTransaction],
    Field(discriminator="type"),
]


class SavingsGoal(BaseModel):
    """A savings target and the progress towards it."""
    model_config = ConfigDict(extra="allow")

    id: Optional[RecordId] = None
    title: Optional[str] = None
    targetAmount: Optional[float] = None
    currentAmount: Optional[float] = None
