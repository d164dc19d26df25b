"""
Double-entry rules shared by posting and reporting.

The normal-balance rule lives here and nowhere else: posting, reversal, the
general-ledger running balance and the balance sheet all derive signs from
`signed_amount`.
"""

import enum
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Tuple

import config
from exceptions import MissingAccountError, UnbalancedEntriesError, ValidationError
from models.accounts import AccountType

CENT = Decimal("0.01")


class BalanceSide(enum.Enum):
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


NORMAL_BALANCE_SIDE = {
    AccountType.ASSET: BalanceSide.DEBIT,
    AccountType.EXPENSE: BalanceSide.DEBIT,
    AccountType.LIABILITY: BalanceSide.CREDIT,
    AccountType.EQUITY: BalanceSide.CREDIT,
    AccountType.REVENUE: BalanceSide.CREDIT,
}


def to_money(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def normal_balance_side(account_type: AccountType) -> BalanceSide:
    return NORMAL_BALANCE_SIDE[AccountType(account_type)]


def opposite_side(side: BalanceSide) -> BalanceSide:
    return BalanceSide.CREDIT if side == BalanceSide.DEBIT else BalanceSide.DEBIT


def signed_amount(account_type: AccountType, side: BalanceSide, amount) -> Decimal:
    """Effect on an account's balance of `amount` booked on `side`.

    Positive when `side` is the account type's normal balance side, negative otherwise.
    """
    amount = to_money(amount)
    return amount if normal_balance_side(account_type) == side else -amount


def entry_postings(entry) -> List[Tuple[int, BalanceSide, Decimal]]:
    """(account_id, side, amount) for every non-zero side of a journal line."""
    postings = []
    debit = to_money(getattr(entry, "debit_amount", 0))
    credit = to_money(getattr(entry, "credit_amount", 0))
    if debit > 0:
        postings.append((entry.debit_account_id, BalanceSide.DEBIT, debit))
    if credit > 0:
        postings.append((entry.credit_account_id, BalanceSide.CREDIT, credit))
    return postings


def entry_totals(entries: Iterable) -> Tuple[Decimal, Decimal]:
    total_debit = Decimal("0.00")
    total_credit = Decimal("0.00")
    for entry in entries:
        total_debit += to_money(getattr(entry, "debit_amount", 0))
        total_credit += to_money(getattr(entry, "credit_amount", 0))
    return total_debit, total_credit


def is_balanced(entries: Iterable, tolerance: Optional[Decimal] = None) -> bool:
    """True when total debit and total credit differ by less than the tolerance."""
    tolerance = config.BALANCE_TOLERANCE if tolerance is None else tolerance
    total_debit, total_credit = entry_totals(entries)
    return abs(total_debit - total_credit) < tolerance


def validate_entries(entries) -> Decimal:
    """
    Gate a proposed set of journal lines before anything is written.

    Every line needs at least one account, and an amount on a side needs an account
    on that side. The lines must balance. Returns the total debit amount.
    """
    entries = list(entries or [])
    if not entries:
        raise ValidationError("A journal must contain at least one entry.")

    for index, entry in enumerate(entries, start=1):
        debit_account_id = getattr(entry, "debit_account_id", None)
        credit_account_id = getattr(entry, "credit_account_id", None)
        if not debit_account_id and not credit_account_id:
            raise MissingAccountError(f"Entry {index} must reference a debit or a credit account.")
        if to_money(getattr(entry, "debit_amount", 0)) < 0 or to_money(getattr(entry, "credit_amount", 0)) < 0:
            raise ValidationError(f"Entry {index} has a negative amount.")
        if to_money(getattr(entry, "debit_amount", 0)) > 0 and not debit_account_id:
            raise MissingAccountError(f"Entry {index} has a debit amount but no debit account.")
        if to_money(getattr(entry, "credit_amount", 0)) > 0 and not credit_account_id:
            raise MissingAccountError(f"Entry {index} has a credit amount but no credit account.")

    total_debit, total_credit = entry_totals(entries)
    if not is_balanced(entries):
        raise UnbalancedEntriesError(
            f"Total debit ({total_debit}) must equal total credit ({total_credit})."
        )
    if total_debit == 0:
        raise ValidationError("A journal must have non-zero debit and credit amounts.")
    return total_debit
