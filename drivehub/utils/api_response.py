from typing import Any, Dict, Optional

from starlette.responses import JSONResponse
from starlette import status

from drivehub.schemas.response import ApiResponse


def _envelope(data: Any, message: Optional[str]) -> Dict[str, Any]:
    # only the envelope drops empty keys, null fields inside data are meaningful
    body = ApiResponse[Any](success=True, message=message, data=data).model_dump(mode="json")
    return {key: value for key, value in body.items() if value is not None}


def ok(
    data: Any = None,
    message: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(content=_envelope(data, message), status_code=status_code, headers=headers)


def created(
    data: Any = None,
    message: str = "Created",
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(content=_envelope(data, message), status_code=status.HTTP_201_CREATED, headers=headers)
