"""JSON response class using orjson serialization.

Set as the default response class of the application. Pydantic models are
dumped in JSON mode, and decimals and dates that reach orjson directly are
rendered as strings.
"""

from decimal import Decimal
from typing import Any

import orjson
from fastapi.responses import JSONResponse
from pydantic import BaseModel


def _default(value: object) -> str:
    if isinstance(value, Decimal):
        return str(value)
    msg = f"Type is not JSON serializable: {type(value).__name__}"
    raise TypeError(msg)


class ORJSONResponse(JSONResponse):
    """FastAPI Response class using orjson for JSON serialization."""

    media_type = "application/json"

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - accepts any JSON-serializable content
        """Render the content as JSON using orjson."""
        if isinstance(content, BaseModel):
            content = content.model_dump(mode="json")

        return orjson.dumps(content, default=_default, option=orjson.OPT_SORT_KEYS)
