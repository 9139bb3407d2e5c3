from collections.abc import Mapping
from typing import Any, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from shopease.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

# Largest value an INTEGER column holds on every supported backend
MAX_INTEGER = 2_147_483_647

# Request-level prefixes FastAPI puts in front of the field location
_LOCATION_PREFIXES = {"body", "path", "query"}


def first_error(errors: Sequence[dict]) -> Tuple[str, str]:
    """Return (field, reason) for the first error pydantic reported."""
    if not errors:
        return "body", "invalid input"

    error = errors[0]
    loc = [str(part) for part in error.get("loc", ())]
    if len(loc) > 1 and loc[0] in _LOCATION_PREFIXES:
        loc = loc[1:]
    field = ".".join(loc) or "body"
    return field, error.get("msg", "invalid value")


def validate_fields(model: Type[ModelT], fields: Any) -> ModelT:
    """
    Validate a field mapping against a pydantic input model.

    Already-validated model instances are passed through unchanged.

    Raises:
        ValidationError: naming the first offending field
    """
    if isinstance(fields, model):
        return fields
    if not isinstance(fields, Mapping):
        raise ValidationError("body", "expected an object of fields")

    try:
        return model.model_validate(dict(fields))
    except PydanticValidationError as e:
        field, reason = first_error(e.errors())
        raise ValidationError(field, reason) from e
