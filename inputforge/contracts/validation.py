from __future__ import annotations

import json
from typing import Any, Dict

import jsonschema
from pydantic import BaseModel

from .errors import ContractViolation
from .models import MutationOptions


def validate_pydantic(model_cls: type[BaseModel], data: Dict[str, Any]) -> BaseModel:
    try:
        return model_cls.model_validate(data)
    except Exception as e:
        raise ContractViolation(f"Contract validation failed for {model_cls.__name__}: {e}") from e


def options_schema() -> Dict[str, Any]:
    return MutationOptions.model_json_schema()


def load_options(data: Dict[str, Any]) -> MutationOptions:
    """
    Validate a raw options document (e.g. from a JSON config file) against the
    published schema first, then build the model.
    """
    try:
        jsonschema.validate(instance=data, schema=options_schema())
    except jsonschema.ValidationError as e:
        raise ContractViolation(f"Mutation options failed schema validation: {e.message}") from e
    return validate_pydantic(MutationOptions, data)  # type: ignore[return-value]


def dump_options_schema() -> str:
    return json.dumps(options_schema(), indent=2, sort_keys=True)
