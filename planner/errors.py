from __future__ import annotations


class PlannerError(KeyError):
    """Base class for lookups that the REST layer maps to 404."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else self.__class__.__name__


class ProfileNotFoundError(PlannerError):
    pass


class SimulationNotFoundError(PlannerError):
    pass


class ItemNotFoundError(PlannerError):
    pass
