"""
Transaction Export Models

One row of the CSV transaction export. Amounts stay in milliunits
until the writer formats them.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from money_age.models.ledger import FlagColor


class ExportRow(BaseModel):
    """A transaction as it appears in the export."""

    model_config = ConfigDict(frozen=True)

    account_name: str
    flag_color: Optional[FlagColor] = None
    date: date
    payee_name: str = ""
    category_group: str = Field(
        default="",
        description="Group of the category; empty for hidden groups"
    )
    category_name: str = ""
    memo: str = ""
    amount: int = Field(
        ...,
        description="Signed amount in milliunits"
    )
    cleared: str = ""

    @property
    def category_path(self) -> str:
        """ "Group: Category", or "" when either part is unknown."""
        if self.category_group and self.category_name:
            return f"{self.category_group}: {self.category_name}"
        return ""
