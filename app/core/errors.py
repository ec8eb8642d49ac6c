# app/core/errors.py
#
# Typed failures raised by the inventory services.
# The HTTP layer turns each one into a JSON response using `status_code`
# and `to_dict()`; none of them should crash the process.

from typing import NamedTuple


class FieldError(NamedTuple):
    field: str
    reason: str


class InventoryError(Exception):
    status_code = 400
    code = "inventory_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "error": self.code}


class ValidationFailed(InventoryError):
    status_code = 422
    code = "validation_failed"

    def __init__(self, errors: list[FieldError]):
        super().__init__("Validation failed")
        self.errors = list(errors)

    @property
    def fields(self) -> list[str]:
        return [error.field for error in self.errors]

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["errors"] = [error._asdict() for error in self.errors]
        return data


class EntityError(InventoryError):
    def __init__(self, message: str, entity_type: str, entity_id: int):
        super().__init__(message)
        self.entity_type = entity_type
        self.entity_id = entity_id

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["entity_type"] = self.entity_type
        data["entity_id"] = self.entity_id
        return data


class NotFound(EntityError):
    status_code = 404
    code = "not_found"

    def __init__(self, entity_type: str, entity_id: int):
        super().__init__(f"{entity_type} not found", entity_type, entity_id)


class IdMismatch(InventoryError):
    status_code = 409
    code = "id_mismatch"

    def __init__(self, path_id: int, payload_id: int):
        super().__init__(f"Path id {path_id} does not match payload id {payload_id}")
        self.path_id = path_id
        self.payload_id = payload_id


class DependentsExist(EntityError):
    status_code = 409
    code = "dependents_exist"

    def __init__(self, entity_type: str, entity_id: int, count: int):
        super().__init__(
            f"{entity_type} has {count} associated product(s) and cannot be deleted. "
            "Deactivate it instead.",
            entity_type,
            entity_id,
        )
        self.count = count

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["count"] = self.count
        return data


class ConcurrencyConflict(EntityError):
    status_code = 409
    code = "concurrency_conflict"

    def __init__(self, entity_type: str, entity_id: int):
        super().__init__(
            f"{entity_type} was modified by another user. Reload and try again.",
            entity_type,
            entity_id,
        )


class Gone(EntityError):
    status_code = 410
    code = "gone"

    def __init__(self, entity_type: str, entity_id: int):
        super().__init__(f"{entity_type} no longer exists", entity_type, entity_id)


class StoreUnavailable(InventoryError):
    status_code = 503
    code = "store_unavailable"

    def __init__(self, cause: Exception):
        super().__init__("Storage is temporarily unavailable")
        self.cause = cause
