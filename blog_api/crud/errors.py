"""Domain errors raised by the CRUD layer and translated by the endpoints."""

from typing import Iterable


class MissingRelationError(LookupError):
    """Some of the ids passed to a relation sync do not exist."""

    def __init__(self, entity: str, missing_ids: Iterable[int]):
        self.entity = entity
        self.missing_ids = sorted(missing_ids)
        super().__init__(f"One or more {entity} do not exist")


class RoleNotFoundError(LookupError):
    def __init__(self, names: Iterable[str]):
        self.names = sorted(names)
        super().__init__(f"Role(s) not found: {', '.join(self.names)}")


class RoleAlreadyAssignedError(ValueError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"User already has role '{name}'")


class RoleNotAssignedError(LookupError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"User does not have role '{name}'")


class CategoryCycleError(ValueError):
    """Reparenting would make a category its own ancestor."""
