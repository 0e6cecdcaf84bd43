# backend/backoffice/api/schemas.py
"""Shared schema building blocks. Resource schemas live next to their routers."""
from decimal import Decimal
from typing import Annotated, List

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from ..core.constants import MONTHS
from ..core.numbers import format_money, format_percent


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case accepted on input, readable from ORM rows."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _check_month(v: str) -> str:
    if v not in MONTHS:
        raise ValueError(f"month must be one of {', '.join(MONTHS)}")
    return v


# "2000.00"
SignedMoney = Annotated[Decimal, PlainSerializer(format_money, return_type=str)]
Money = Annotated[SignedMoney, Field(ge=0)]
# "10", "12.5"
Percent = Annotated[Decimal, Field(ge=0), PlainSerializer(format_percent, return_type=str)]
MonthName = Annotated[str, AfterValidator(_check_month)]
Year = Annotated[int, Field(ge=1000, le=9999)]


class IdsIn(CamelModel):
    ids: List[int] = Field(..., min_length=1)


class SuccessOut(CamelModel):
    success: bool = True
