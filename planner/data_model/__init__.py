from .base import FieldDefinition, FormModel
from .cashflow import (
    CashflowItem,
    ExpenseFormModel,
    IncomeFormModel,
    SavingFormModel,
    SavingItem,
    records_to_cashflows,
    records_to_savings,
)
from .debt import DEBT_TYPE_LABELS, DEBT_TYPES, DebtFormModel, DebtItem, records_to_debts
from .pension import PENSION_TYPE_LABELS, PENSION_TYPES, PensionFormModel, PensionItem, records_to_pensions
from .plan import PlanConfig, Profile, ProfileFormModel

ITEM_KINDS = ("incomes", "expenses", "savings", "pensions", "debts")

__all__ = [
    "DEBT_TYPES",
    "DEBT_TYPE_LABELS",
    "ITEM_KINDS",
    "PENSION_TYPES",
    "PENSION_TYPE_LABELS",
    "CashflowItem",
    "DebtFormModel",
    "DebtItem",
    "ExpenseFormModel",
    "FieldDefinition",
    "FormModel",
    "IncomeFormModel",
    "PensionFormModel",
    "PensionItem",
    "PlanConfig",
    "Profile",
    "ProfileFormModel",
    "SavingFormModel",
    "SavingItem",
    "records_to_cashflows",
    "records_to_debts",
    "records_to_pensions",
    "records_to_savings",
]
