"""
JSON File Ledger Source

Reads a budget from YNAB API responses saved to disk, one file per
endpoint, each in the API's {"data": {...}} envelope:

    <data_dir>/budgets.json                 {"data": {"budgets": [...]}}
    <data_dir>/accounts.json                {"data": {"accounts": [...]}}
    <data_dir>/transactions.json            {"data": {"transactions": [...]}}
    <data_dir>/scheduled_transactions.json  {"data": {"scheduled_transactions": [...]}}
    <data_dir>/categories.json              {"data": {"category_groups": [...]}}

Saving the responses once (e.g. with curl) and computing from the
files is much faster than re-downloading a large transaction history.

TRADEOFFS:
- A directory holds one export; budget_id is only checked for budgets
- The scheduled transactions and categories files are optional
"""

import json
from pathlib import Path
from typing import Any, Optional, TypeVar, Union

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from money_age.config import get_settings
from money_age.errors import LedgerFormatError, LedgerNotFoundError
from money_age.models.ledger import (
    Account,
    Budget,
    CategoryGroup,
    ScheduledTransaction,
    Transaction,
)
from money_age.services.ledger.interface import LedgerSourceInterface

logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

BUDGETS_FILE = "budgets.json"
ACCOUNTS_FILE = "accounts.json"
TRANSACTIONS_FILE = "transactions.json"
SCHEDULED_TRANSACTIONS_FILE = "scheduled_transactions.json"
CATEGORIES_FILE = "categories.json"


class JsonFileLedgerSource(LedgerSourceInterface):
    """
    Ledger source backed by exported API responses.

    Files are parsed lazily and cached per instance.
    """

    def __init__(self, data_dir: Optional[Union[str, Path]] = None):
        self._data_dir = Path(data_dir or get_settings().ledger.data_dir)
        self._cache: dict[str, Any] = {}

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def description(self) -> str:
        return f"json:{self._data_dir}"

    def clear_cache(self) -> None:
        """Forget parsed files so the next load re-reads the disk."""
        self._cache.clear()

    def _read_envelope(self, filename: str, required: bool = True) -> Optional[dict]:
        """Read a file and return its "data" object."""
        if filename in self._cache:
            return self._cache[filename]

        path = self._data_dir / filename
        try:
            with open(path, encoding="utf-8") as f:
                payload = json.load(f)
        except FileNotFoundError:
            if required:
                raise LedgerNotFoundError(f"Ledger file not found: {path}") from None
            logger.debug("ledger_file_missing", path=str(path))
            self._cache[filename] = None
            return None
        except json.JSONDecodeError as e:
            raise LedgerFormatError(f"{path} is not valid JSON: {e}") from e

        if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
            raise LedgerFormatError(f"{path} has no \"data\" object")

        self._cache[filename] = payload["data"]
        return payload["data"]

    def _read_list(
        self,
        filename: str,
        key: str,
        model: type[RecordT],
        required: bool = True,
    ) -> list[RecordT]:
        """Parse the list stored under data[key] into models."""
        data = self._read_envelope(filename, required=required)
        if data is None:
            return []
        if key not in data:
            raise LedgerFormatError(f"{self._data_dir / filename} has no {key!r} list")

        try:
            records = TypeAdapter(list[model]).validate_python(data[key])
        except ValidationError as e:
            raise LedgerFormatError(
                f"{self._data_dir / filename} doesn't match the expected shape: {e}"
            ) from e

        logger.debug("ledger_file_parsed", file=filename, count=len(records))
        return records

    async def get_budgets(self) -> list[Budget]:
        return self._read_list(BUDGETS_FILE, "budgets", Budget)

    async def get_accounts(self, budget_id: str) -> list[Account]:
        return self._read_list(ACCOUNTS_FILE, "accounts", Account)

    async def get_transactions(self, budget_id: str) -> list[Transaction]:
        return self._read_list(TRANSACTIONS_FILE, "transactions", Transaction)

    async def get_scheduled_transactions(self, budget_id: str) -> list[ScheduledTransaction]:
        return self._read_list(
            SCHEDULED_TRANSACTIONS_FILE,
            "scheduled_transactions",
            ScheduledTransaction,
            required=False,
        )

    async def get_categories(self, budget_id: str) -> list[CategoryGroup]:
        return self._read_list(
            CATEGORIES_FILE,
            "category_groups",
            CategoryGroup,
            required=False,
        )
