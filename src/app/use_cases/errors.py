"""Translation of domain exceptions into use case errors"""

from libs.result import Error
from src.domain.exceptions import BillingError


def domain_error(exc: BillingError) -> Error:
    """Error carrying the exception's own code and structured details"""
    details = {k: v for k, v in exc.to_dict().items() if k not in ("code", "message")}
    reason = ", ".join(f"{key}={value}" for key, value in details.items()) or None
    return Error(code=exc.code, message=exc.message, reason=reason)


def not_found(entity: str, entity_id: str) -> Error:
    return Error(
        code=f"{entity.upper()}_NOT_FOUND",
        message=f"{entity.capitalize()} with ID {entity_id} not found",
    )
