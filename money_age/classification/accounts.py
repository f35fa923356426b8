"""
Account Classifier

Answers two questions about the account graph:
1. Does this account hold real cash?
2. Which account is on the other side of this transfer?

A reference that doesn't resolve means the snapshot is broken,
so lookups raise UnknownAccountError instead of returning None.
"""

from typing import Mapping, Optional

from money_age.errors import UnknownAccountError
from money_age.models.ledger import Account, Transaction


def is_cash_backed(account: Account) -> bool:
    """True iff the account is cash, checking or savings."""
    return account.cash_backed


def resolve_account(
    account_id: str,
    accounts: Mapping[str, Account],
    transaction_id: Optional[str] = None,
) -> Account:
    """
    Look up an account by id.

    Raises:
        UnknownAccountError: If the id isn't in `accounts`
    """
    try:
        return accounts[account_id]
    except KeyError:
        raise UnknownAccountError(account_id, transaction_id) from None


def resolve_transfer(
    tx: Transaction,
    accounts: Mapping[str, Account],
) -> Optional[Account]:
    """
    Resolve the other account of a transfer.

    Returns None for ordinary (non-transfer) transactions.

    Raises:
        UnknownAccountError: If the transfer account isn't in `accounts`
    """
    if tx.transfer_account_id is None:
        return None
    return resolve_account(tx.transfer_account_id, accounts, tx.id)
