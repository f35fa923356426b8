"""
Abstract Ledger Source Interface

DESIGN DECISION: The computation never fetches data itself. A ledger
source loads the whole snapshot up front, and the core only ever
sees the result. This allows us to:
1. Read exported API responses from disk
2. Add a live API client later without touching the core
3. Use in-memory sources for testing
"""

from abc import ABC, abstractmethod
from typing import Optional

from money_age.errors import BudgetSelectionError
from money_age.models.ledger import (
    Account,
    Budget,
    CategoryGroup,
    LedgerSnapshot,
    ScheduledTransaction,
    Transaction,
)


class LedgerSourceInterface(ABC):
    """
    Abstract interface for loading a budget's ledger.

    Any source (exported files, the live API, ...) must implement
    these methods.
    """

    @abstractmethod
    async def get_budgets(self) -> list[Budget]:
        """
        List the budgets available from this source.

        Raises:
            LedgerSourceError: If the budgets can't be loaded
        """
        pass

    @abstractmethod
    async def get_accounts(self, budget_id: str) -> list[Account]:
        """
        Get every account of a budget.

        Raises:
            LedgerSourceError: If the accounts can't be loaded
        """
        pass

    @abstractmethod
    async def get_transactions(self, budget_id: str) -> list[Transaction]:
        """
        Get every posted transaction of a budget.

        Raises:
            LedgerSourceError: If the transactions can't be loaded
        """
        pass

    @abstractmethod
    async def get_scheduled_transactions(self, budget_id: str) -> list[ScheduledTransaction]:
        """
        Get every scheduled transaction of a budget.

        Raises:
            LedgerSourceError: If the scheduled transactions can't be loaded
        """
        pass

    @abstractmethod
    async def get_categories(self, budget_id: str) -> list[CategoryGroup]:
        """
        Get the category groups of a budget, with their categories.

        Only the transaction export reads them.

        Raises:
            LedgerSourceError: If the categories can't be loaded
        """
        pass

    @property
    def description(self) -> str:
        """Human-readable name of the source, for logs."""
        return type(self).__name__

    async def load_snapshot(self, budget_name: Optional[str] = None) -> LedgerSnapshot:
        """
        Load a complete snapshot of one budget.

        Raises:
            BudgetSelectionError: If the budget can't be determined
            LedgerSourceError: If any part of the ledger can't be loaded
        """
        budget = select_budget(await self.get_budgets(), budget_name)
        return LedgerSnapshot(
            budget=budget,
            accounts=await self.get_accounts(budget.id),
            transactions=await self.get_transactions(budget.id),
            scheduled_transactions=await self.get_scheduled_transactions(budget.id),
            category_groups=await self.get_categories(budget.id),
        )


def select_budget(budgets: list[Budget], name: Optional[str] = None) -> Budget:
    """
    Pick the budget to compute.

    With exactly one budget, that's the one. Otherwise `name`
    is required and must match a budget exactly.

    Raises:
        BudgetSelectionError: If no budget matches
    """
    if not budgets:
        raise BudgetSelectionError("no budgets found")
    if len(budgets) == 1 and not name:
        return budgets[0]
    if not name:
        raise BudgetSelectionError(
            "there are several budgets, please set a budget name to tell us which to calculate!"
        )
    for budget in budgets:
        if budget.name == name:
            return budget
    raise BudgetSelectionError(f"could not find budget with name {name!r}, please double check!")
