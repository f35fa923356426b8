"""
Transaction Classifier

Turns a raw ledger transaction into a semantic movement of money:
INCOME, OUTFLOW or IGNORED.

DESIGN DECISION: Two consumers need this, and they disagree about what
counts as "real" money movement:

    POLICY A (aging)     - what feeds and drains the budget's cash
    POLICY B (net worth) - what enters or leaves the household

Both walk the SAME decision tree over the account graph. The tree
places a transaction at a LEAF (cash account paying a credit card,
credit card receiving a payment, ...). A policy is just a table
mapping each leaf to a TREATMENT (ignore it, count it by sign, count
it as a card settlement, ...). Keeping one tree stops the two
reports from drifting apart.

The classifier is TOTAL: every transaction lands on exactly one leaf
and every policy defines every leaf. The only failure is an account
reference that doesn't resolve, which is a data inconsistency.
"""

from enum import Enum
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from money_age.classification.accounts import resolve_account, resolve_transfer
from money_age.models.ledger import Account, AccountType, Transaction


# =============================================================================
# ENUMS
# =============================================================================

class MovementKind(str, Enum):
    """What a transaction means for the consumer's policy."""
    INCOME = "income"
    OUTFLOW = "outflow"
    IGNORED = "ignored"


class Leaf(str, Enum):
    """
    Position of a transaction in the account/transfer tree.

    "Cash" means cash-backed (cash/checking/savings); "non-cash"
    is everything else (credit cards, loans, tracking assets).
    """
    OFF_BUDGET_ACCOUNT = "off_budget_account"
    CASH_DIRECT = "cash_direct"
    CASH_TO_OFF_BUDGET = "cash_to_off_budget"
    CASH_TO_NON_CASH = "cash_to_non_cash"
    CASH_TO_CASH = "cash_to_cash"
    CREDIT_DIRECT = "credit_direct"          # on-budget non-cash, no transfer
    TRACKING_DIRECT = "tracking_direct"      # off-budget non-cash, no transfer
    NON_CASH_TO_NON_CASH = "non_cash_to_non_cash"
    NON_CASH_FROM_CASH = "non_cash_from_cash"


class Treatment(str, Enum):
    """What a policy does with the transactions on a leaf."""
    IGNORE = "ignore"
    SIGNED = "signed"              # positive is income, negative is outflow
    SPEND_ONLY = "spend_only"      # negative is outflow, the rest is ignored
    INCOME_ONLY = "income_only"    # positive is income, the rest is ignored
    SETTLEMENT = "settlement"      # positive is an outflow with its sign flipped
    CARD_PAYOFF = "card_payoff"    # negative transfer to a creditCard is an outflow


# =============================================================================
# POLICIES
# =============================================================================

class ClassificationPolicy(BaseModel):
    """
    Maps every leaf of the classification tree to a treatment.

    `scheduled_overrides` replaces treatments for scheduled
    transactions, which are only ever seen from one side.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    excludes_off_budget: bool = Field(
        ...,
        description="Ignore every transaction in an off-budget account"
    )
    treatments: dict[Leaf, Treatment]
    scheduled_overrides: dict[Leaf, Treatment] = Field(default_factory=dict)

    @model_validator(mode='after')
    def validate_total(self) -> 'ClassificationPolicy':
        """Every reachable leaf must have a treatment."""
        reachable = set(Leaf)
        if not self.excludes_off_budget:
            reachable.discard(Leaf.OFF_BUDGET_ACCOUNT)
        missing = reachable - set(self.treatments)
        if missing:
            names = ", ".join(sorted(leaf.value for leaf in missing))
            raise ValueError(f"Policy {self.name!r} has no treatment for: {names}")
        return self

    def treatment_for(self, leaf: Leaf, scheduled: bool = False) -> Treatment:
        if scheduled and leaf in self.scheduled_overrides:
            return self.scheduled_overrides[leaf]
        return self.treatments[leaf]


# Policy A: budget aging. Credit spending is aged when the card is
# paid (NON_CASH_FROM_CASH), not when the purchase happens, so the
# cash side of that payment is ignored to avoid counting it twice.
# A scheduled cash -> credit payment has no mirror record yet, so the
# cash side is the only place it can be counted.
BUDGET_AGING_POLICY = ClassificationPolicy(
    name="budget_aging",
    excludes_off_budget=True,
    treatments={
        Leaf.OFF_BUDGET_ACCOUNT: Treatment.IGNORE,
        Leaf.CASH_DIRECT: Treatment.SIGNED,
        Leaf.CASH_TO_OFF_BUDGET: Treatment.SIGNED,
        Leaf.CASH_TO_NON_CASH: Treatment.IGNORE,
        Leaf.CASH_TO_CASH: Treatment.IGNORE,
        Leaf.CREDIT_DIRECT: Treatment.IGNORE,
        Leaf.TRACKING_DIRECT: Treatment.IGNORE,
        Leaf.NON_CASH_TO_NON_CASH: Treatment.IGNORE,
        Leaf.NON_CASH_FROM_CASH: Treatment.SETTLEMENT,
    },
    scheduled_overrides={
        Leaf.CASH_TO_NON_CASH: Treatment.SPEND_ONLY,
    },
)

# Policy B: net worth "black box". Anything crossing the household
# boundary counts; moving money between our own accounts doesn't,
# except that paying off a credit card is where card spending shows up.
NET_WORTH_POLICY = ClassificationPolicy(
    name="net_worth",
    excludes_off_budget=False,
    treatments={
        Leaf.CASH_DIRECT: Treatment.SIGNED,
        Leaf.CASH_TO_OFF_BUDGET: Treatment.CARD_PAYOFF,
        Leaf.CASH_TO_NON_CASH: Treatment.CARD_PAYOFF,
        Leaf.CASH_TO_CASH: Treatment.CARD_PAYOFF,
        Leaf.CREDIT_DIRECT: Treatment.INCOME_ONLY,
        Leaf.TRACKING_DIRECT: Treatment.SIGNED,
        Leaf.NON_CASH_TO_NON_CASH: Treatment.IGNORE,
        Leaf.NON_CASH_FROM_CASH: Treatment.IGNORE,
    },
)


# =============================================================================
# CLASSIFICATION
# =============================================================================

class ClassifiedTransaction(BaseModel):
    """
    A transaction together with its meaning under a policy.

    `amount` is sign-normalized: positive for INCOME, negative for
    OUTFLOW (a card settlement arrives positive and is flipped).
    The original transaction is left untouched.
    """

    model_config = ConfigDict(frozen=True)

    transaction: Transaction
    account: Account
    transfer_account: Optional[Account] = None
    leaf: Leaf
    kind: MovementKind
    amount: int

    @property
    def magnitude(self) -> int:
        return abs(self.amount)


def locate_leaf(
    account: Account,
    transfer_account: Optional[Account],
    excludes_off_budget: bool,
) -> Leaf:
    """Place a transaction in the account/transfer tree."""
    if excludes_off_budget and not account.on_budget:
        return Leaf.OFF_BUDGET_ACCOUNT

    if account.cash_backed:
        if transfer_account is None:
            return Leaf.CASH_DIRECT
        if not transfer_account.on_budget:
            return Leaf.CASH_TO_OFF_BUDGET
        if not transfer_account.cash_backed:
            return Leaf.CASH_TO_NON_CASH
        return Leaf.CASH_TO_CASH

    if transfer_account is None:
        return Leaf.CREDIT_DIRECT if account.on_budget else Leaf.TRACKING_DIRECT
    if not transfer_account.cash_backed:
        return Leaf.NON_CASH_TO_NON_CASH
    return Leaf.NON_CASH_FROM_CASH


def _apply_treatment(
    treatment: Treatment,
    amount: int,
    transfer_account: Optional[Account],
) -> tuple[MovementKind, int]:
    """Turn a treatment and a signed amount into (kind, normalized amount)."""
    # Zero-amount entries move no money under any treatment.
    if amount == 0 or treatment is Treatment.IGNORE:
        return MovementKind.IGNORED, amount

    if treatment is Treatment.SIGNED:
        kind = MovementKind.INCOME if amount > 0 else MovementKind.OUTFLOW
        return kind, amount

    if treatment is Treatment.SPEND_ONLY:
        if amount < 0:
            return MovementKind.OUTFLOW, amount
        return MovementKind.IGNORED, amount

    if treatment is Treatment.INCOME_ONLY:
        if amount > 0:
            return MovementKind.INCOME, amount
        return MovementKind.IGNORED, amount

    if treatment is Treatment.SETTLEMENT:
        if amount > 0:
            return MovementKind.OUTFLOW, -amount
        return MovementKind.IGNORED, amount

    # CARD_PAYOFF
    if (
        amount < 0
        and transfer_account is not None
        and transfer_account.type is AccountType.CREDIT_CARD
    ):
        return MovementKind.OUTFLOW, amount
    return MovementKind.IGNORED, amount


def classify(
    tx: Transaction,
    accounts: Mapping[str, Account],
    policy: ClassificationPolicy = BUDGET_AGING_POLICY,
    scheduled: bool = False,
) -> ClassifiedTransaction:
    """
    Classify a transaction under a policy.

    Args:
        tx: The transaction (or a scheduled transaction's projection)
        accounts: All accounts of the budget, keyed by id
        policy: Which consumer's notion of "real" money movement to use
        scheduled: True when `tx` is projected from a scheduled transaction

    Raises:
        UnknownAccountError: If the account or transfer account
            isn't in `accounts`
    """
    account = resolve_account(tx.account_id, accounts, tx.id)
    transfer_account = resolve_transfer(tx, accounts)

    leaf = locate_leaf(account, transfer_account, policy.excludes_off_budget)
    treatment = policy.treatment_for(leaf, scheduled)
    kind, amount = _apply_treatment(treatment, tx.amount, transfer_account)

    return ClassifiedTransaction(
        transaction=tx,
        account=account,
        transfer_account=transfer_account,
        leaf=leaf,
        kind=kind,
        amount=amount,
    )


def is_outflow(
    tx: Transaction,
    accounts: Mapping[str, Account],
    scheduled: bool = False,
) -> bool:
    """Policy A: does this transaction drain the budget's money?"""
    return classify(tx, accounts, BUDGET_AGING_POLICY, scheduled).kind is MovementKind.OUTFLOW


def is_black_box(tx: Transaction, accounts: Mapping[str, Account]) -> bool:
    """Policy B: does this transaction cross the household boundary?"""
    return classify(tx, accounts, NET_WORTH_POLICY).kind is not MovementKind.IGNORED
