from .aggregate import lifetime_totals, slice_by_age
from .amortization import build_schedule, level_payment
from .simulator import build_plan_config, build_simulation_data, simulate_yearly
from .state import ProfileState

__all__ = [
    "ProfileState",
    "build_plan_config",
    "build_schedule",
    "build_simulation_data",
    "level_payment",
    "lifetime_totals",
    "simulate_yearly",
    "slice_by_age",
]
