from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from core.config import ProjectionSettings
from core.schema import BusinessModel

from .payload import EnvironmentPayload

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)


def _strip_fence(text: str) -> str:
    match = _FENCE.match(text)
    return match.group(1) if match else text


def parse_environment(
    data: Union[Dict[str, Any], str, bytes],
) -> Tuple[BusinessModel, ProjectionSettings, Dict[str, List[str]]]:
    """
    Turn a proposed environment (dict or JSON text) into engine inputs.

    Text may be wrapped in a ```json fence, as assistant replies usually are.
    Raises ``pydantic.ValidationError`` when the structure is wrong (e.g. ``products``
    is not a list); bad values inside a well-formed structure are coerced instead.
    """
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    if isinstance(data, str):
        payload = EnvironmentPayload.model_validate_json(_strip_fence(data))
    else:
        payload = EnvironmentPayload.model_validate(data)

    model = payload.to_business_model()
    settings = payload.to_projection_settings()
    if not model.products:
        logger.warning("Environment has no products; projection revenue will be zero.")
    logger.info(
        "Parsed environment: %d products, %d fixed, %d semi-variable, %d variable cost lines",
        len(model.products), len(model.fixed_costs), len(model.semi_variable_costs), len(model.variable_costs),
    )
    return model, settings, payload.insights.model_dump()


def load_environment_json(
    path: Union[str, Path],
) -> Tuple[BusinessModel, ProjectionSettings, Dict[str, List[str]]]:
    """
    Load a saved environment file (same shape the assistant proposes).
    """
    with open(path, "r", encoding="utf-8") as fh:
        raw = json.load(fh)
    return parse_environment(raw)
