"""
Form validation helpers

Turns raw form fields into a validated schema instance, or into a
``{field: message}`` dict suitable for re-rendering the form.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

FORM_ERROR_KEY = "_form"

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _prepare(schema: Type[BaseModel], data: Mapping[str, Any]) -> Dict[str, Any]:
    prepared: Dict[str, Any] = {}
    for name, field in schema.model_fields.items():
        if name not in data:
            # Missing required fields go through the field validators as blanks
            if field.is_required():
                prepared[name] = ""
            continue

        value = data[name]
        if value == "" and not field.is_required():
            if field.default is None:
                prepared[name] = None
            continue

        prepared[name] = value
    return prepared


def _message(error: Dict[str, Any]) -> str:
    if error.get("type") == "value_error" and error.get("ctx", {}).get("error") is not None:
        return str(error["ctx"]["error"])
    return error.get("msg", "Invalid value")


def validate_form_data(
    schema: Type[SchemaT],
    data: Mapping[str, Any]
) -> Tuple[Optional[SchemaT], Optional[Dict[str, str]]]:
    """
    Validate form data against a schema

    Args:
        schema: Pydantic model class
        data: Raw form fields

    Returns:
        tuple: (validated model or None, errors dict or None)
    """
    try:
        return schema.model_validate(_prepare(schema, data)), None
    except ValidationError as e:
        errors: Dict[str, str] = {}
        for error in e.errors():
            field_name = ".".join(str(part) for part in error.get("loc", ())) or FORM_ERROR_KEY
            errors.setdefault(field_name, _message(error))
        return None, errors
    except Exception as e:
        logger.error(f"Unexpected validation error for {schema.__name__}: {e}")
        return None, {FORM_ERROR_KEY: "An unexpected error occurred during validation"}
