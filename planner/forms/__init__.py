from .base import ItemForm, parse_float, parse_int, sanitize_numeric
from .calculator import CalculatorForm, dc_pension, goal_saving
from .cashflow import ExpenseForm, IncomeForm, SavingForm
from .debt import DebtForm
from .pension import PensionForm
from .profile import ProfileForm
from .simulation import SimulationForm, validate_title

FORM_REGISTRY = {
    "incomes": IncomeForm,
    "expenses": ExpenseForm,
    "savings": SavingForm,
    "pensions": PensionForm,
    "debts": DebtForm,
}

__all__ = [
    "FORM_REGISTRY",
    "CalculatorForm",
    "DebtForm",
    "ExpenseForm",
    "IncomeForm",
    "ItemForm",
    "PensionForm",
    "ProfileForm",
    "SavingForm",
    "SimulationForm",
    "dc_pension",
    "goal_saving",
    "parse_float",
    "parse_int",
    "sanitize_numeric",
    "validate_title",
]
