import pandas as pd

from ..data_model import DebtItem

SCHEDULE_COLUMNS = ["Year", "Opening", "Interest", "Principal", "Payment", "Closing"]


def level_payment(principal: float, rate: float, periods: int) -> float:
    """Annual payment that retires ``principal`` over ``periods`` years (PMT)."""
    if periods <= 0:
        return principal
    if rate == 0:
        return principal / periods
    return principal * rate / (1.0 - (1.0 + rate) ** -periods)


def build_schedule(debt: DebtItem) -> pd.DataFrame:
    """Yearly repayment schedule, one row per year from start to end year.

    bullet     interest only, full principal in the final year
    equal      level payment (원리금균등)
    principal  equal principal share with interest on the opening balance (원금균등)
    grace      interest only for ``grace_period`` years, then level payment
    """
    term = debt.term_years
    rate = debt.interest_rate
    balance = float(debt.amount)
    grace = min(max(0, debt.grace_period), term - 1) if debt.debt_type == "grace" else 0
    payment = 0.0
    if debt.debt_type == "equal":
        payment = level_payment(balance, rate, term)
    elif debt.debt_type == "grace":
        payment = level_payment(balance, rate, term - grace)

    rows = []
    for offset in range(term):
        year = debt.start_year + offset
        last = offset == term - 1
        interest = balance * rate
        if debt.debt_type == "bullet":
            principal = balance if last else 0.0
        elif debt.debt_type == "principal":
            principal = debt.amount / term
        elif debt.debt_type == "grace" and offset < grace:
            principal = 0.0
        else:
            principal = payment - interest
        if last or principal > balance:
            principal = balance
        rows.append(
            {
                "Year": year,
                "Opening": balance,
                "Interest": interest,
                "Principal": principal,
                "Payment": interest + principal,
                "Closing": balance - principal,
            }
        )
        balance -= principal
    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)
