from .metrics import REPORT_PAGES, cashflow_analysis, debt_management, retirement_risk, savings_capacity

__all__ = ["REPORT_PAGES", "cashflow_analysis", "debt_management", "retirement_risk", "savings_capacity"]
