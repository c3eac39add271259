"""Typed errors raised by the inventory core.

Each class carries a machine-readable ``code`` and an HTTP status so the API
layer can render it without parsing messages.
"""


class InventoryError(Exception):
    code = "INVENTORY_ERROR"
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"success": False, "code": self.code, "error": self.message}


class ValidationError(InventoryError):
    """One or more fields failed validation. Nothing was written."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, errors: list[dict]):
        self.errors = errors
        fields = ", ".join(e["field"] for e in errors)
        super().__init__(f"Invalid fields: {fields}")

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([{"field": field, "message": message}])

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationError":
        """Collapse pydantic errors to one entry per field."""
        errors: dict[str, str] = {}
        for err in exc.errors():
            loc = [str(part) for part in err.get("loc", ()) if part != "body"]
            field = ".".join(loc) or "__root__"
            errors.setdefault(field, err.get("msg", "Invalid value"))
        return cls([{"field": f, "message": m} for f, m in errors.items()])

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["errors"] = self.errors
        return data


class NotFoundError(InventoryError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")


class ConflictError(InventoryError):
    """The write lost a race or hit a uniqueness rule. Safe to retry."""

    code = "CONFLICT"
    status_code = 409


class PersistenceError(InventoryError):
    """Storage failure. Not retried automatically."""

    code = "PERSISTENCE_ERROR"
    status_code = 500

    def __init__(self, message: str, details: str | None = None):
        self.details = details
        super().__init__(message)
