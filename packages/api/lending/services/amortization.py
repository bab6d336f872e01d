# This project was developed with assistance from AI tools.
"""Loan amortization schedule calculation.

Pure math, no I/O. Shared by the public calculator route and the loan
origination flow.

All arithmetic is done in ``Decimal``. Currency figures are quantized to
cents with ROUND_HALF_UP; the running balance is carried unrounded so the
rounded principal portions sum to the original principal within one cent
per installment.
"""

import calendar
import secrets
import string
import time
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")

# Upper bounds match the loans table: principal Numeric(14, 2), term in months.
MAX_PRINCIPAL = Decimal("999999999999.99")
MAX_ANNUAL_RATE = Decimal(100)
MAX_TERM_MONTHS = 600

_BASE36_DIGITS = string.digits + string.ascii_uppercase


class InvalidLoanParameters(ValueError):
    """Raised when principal, rate, or term are outside their valid ranges."""


@dataclass(frozen=True)
class AmortizationRow:
    """One repayment installment."""

    installment_number: int
    due_date: date
    principal_due: Decimal
    interest_due: Decimal
    total_due: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class AmortizationResult:
    """Payment summary plus the ordered installment schedule."""

    monthly_payment: Decimal
    total_interest: Decimal
    total_payment: Decimal
    schedule: list[AmortizationRow] = field(default_factory=list)


def to_cents(value: Decimal) -> Decimal:
    """Round a currency amount to 2 decimal places, half away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def add_months(start: date, months: int) -> date:
    """Advance a date by whole months, clamping the day to the month's end.

    Works for both ``date`` and ``datetime`` (time of day is preserved).
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def _to_decimal(value, name: str) -> Decimal:
    try:
        return value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidLoanParameters(f"{name} must be numeric, got {value!r}") from exc


def _validate(principal: Decimal, annual_rate: Decimal, term_months) -> None:
    if not principal.is_finite() or principal <= 0:
        raise InvalidLoanParameters(f"principal must be positive, got {principal}")
    if principal > MAX_PRINCIPAL:
        raise InvalidLoanParameters(f"principal must not exceed {MAX_PRINCIPAL}, got {principal}")
    if not annual_rate.is_finite() or annual_rate < 0:
        raise InvalidLoanParameters(f"annual rate must not be negative, got {annual_rate}")
    if annual_rate > MAX_ANNUAL_RATE:
        raise InvalidLoanParameters(f"annual rate must not exceed {MAX_ANNUAL_RATE}%, got {annual_rate}")
    if isinstance(term_months, bool) or not isinstance(term_months, int) or term_months <= 0:
        raise InvalidLoanParameters(f"term must be a positive whole number of months, got {term_months!r}")
    if term_months > MAX_TERM_MONTHS:
        raise InvalidLoanParameters(f"term must not exceed {MAX_TERM_MONTHS} months, got {term_months}")


def compute_amortization(
    principal: Decimal | float | int,
    annual_rate_percent: Decimal | float | int,
    term_months: int,
    start_date: date,
) -> AmortizationResult:
    """Compute a fixed-payment monthly schedule.

    Args:
        principal: Amount borrowed. Must be positive, at most MAX_PRINCIPAL.
        annual_rate_percent: Nominal annual rate in percent (12 means 12%). 0 to 100.
        term_months: Number of monthly installments. 1 to MAX_TERM_MONTHS.
        start_date: Disbursement date; installment ``n`` is due ``n`` months later.

    Returns:
        AmortizationResult with rounded summary figures and the schedule.

    Raises:
        InvalidLoanParameters: If any input is out of range.
    """
    principal = _to_decimal(principal, "principal")
    annual_rate = _to_decimal(annual_rate_percent, "annual rate")
    _validate(principal, annual_rate, term_months)

    try:
        return _amortize(principal, annual_rate, term_months, start_date)
    except InvalidOperation as exc:
        raise InvalidLoanParameters(
            f"cannot amortize {principal} at {annual_rate}% over {term_months} months"
        ) from exc


def _amortize(
    principal: Decimal, annual_rate: Decimal, term_months: int, start_date: date
) -> AmortizationResult:
    monthly_rate = annual_rate / 100 / 12

    if monthly_rate == 0:
        payment = principal / term_months
    else:
        compound = (1 + monthly_rate) ** term_months
        payment = principal * monthly_rate * compound / (compound - 1)

    monthly_payment = to_cents(payment)
    if monthly_rate == 0:
        # Interest-free: totals come from the principal, not the rounded payment x term.
        total_payment = to_cents(principal)
        total_interest = Decimal("0.00")
    else:
        total_payment = monthly_payment * term_months
        total_interest = total_payment - principal

    schedule: list[AmortizationRow] = []
    balance = principal
    for month in range(1, term_months + 1):
        interest = balance * monthly_rate
        principal_part = payment - interest
        balance -= principal_part
        if balance < 0 or month == term_months:
            balance = Decimal(0)

        schedule.append(
            AmortizationRow(
                installment_number=month,
                due_date=add_months(start_date, month),
                principal_due=to_cents(principal_part),
                interest_due=to_cents(interest),
                total_due=monthly_payment,
                remaining_balance=to_cents(balance),
            )
        )

    return AmortizationResult(
        monthly_payment=monthly_payment,
        total_interest=total_interest,
        total_payment=total_payment,
        schedule=schedule,
    )


def _base36(number: int) -> str:
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits)) or "0"


def generate_loan_number() -> str:
    """Return a loan number like ``LN-MF3K2Q1A-7XQ2B``.

    Millisecond timestamp in base 36 followed by five random base-36 characters.
    """
    suffix = "".join(secrets.choice(_BASE36_DIGITS) for _ in range(5))
    return f"LN-{_base36(time.time_ns() // 1_000_000)}-{suffix}"
