"""Account and transaction classification package."""

from money_age.classification.accounts import (
    is_cash_backed,
    resolve_account,
    resolve_transfer,
)
from money_age.classification.policy import (
    BUDGET_AGING_POLICY,
    NET_WORTH_POLICY,
    ClassificationPolicy,
    ClassifiedTransaction,
    Leaf,
    MovementKind,
    Treatment,
    classify,
    is_black_box,
    is_outflow,
    locate_leaf,
)

__all__ = [
    "BUDGET_AGING_POLICY",
    "NET_WORTH_POLICY",
    "ClassificationPolicy",
    "ClassifiedTransaction",
    "Leaf",
    "MovementKind",
    "Treatment",
    "classify",
    "is_black_box",
    "is_cash_backed",
    "is_outflow",
    "locate_leaf",
    "resolve_account",
    "resolve_transfer",
]
