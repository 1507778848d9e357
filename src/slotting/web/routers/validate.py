"""Configuration validation endpoints."""

from fastapi import APIRouter

from slotting.application.config import load_config_from_dict, validate_config
from slotting.web.schemas.requests import ConfigValidateRequest
from slotting.web.schemas.responses import ValidationResultSchema

router = APIRouter(prefix="/validate", tags=["validate"])


@router.post("", response_model=ValidationResultSchema)
async def validate_configuration(
    request: ConfigValidateRequest,
) -> ValidationResultSchema:
    """Validate a warehouse configuration without loading it.

    Raises:
        ConfigError: If the configuration does not match the schema
            (handled by exception handler).
    """
    config = load_config_from_dict(request.config)
    result = validate_config(config)

    return ValidationResultSchema(
        is_valid=result.is_valid,
        errors=[{"message": e.message, "path": e.path} for e in result.errors],
        warnings=[{"message": w.message, "path": w.path} for w in result.warnings],
    )
