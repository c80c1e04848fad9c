from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Optional, Generic, TypeVar
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

T = TypeVar('T')


class CamelModel(BaseModel):
    """Base for payload schemas: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(BaseModel, Generic[T]):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    data: Optional[T] = None
    status_code: int = Field(alias="statusCode")


def envelope(
    message: str,
    data: Any = None,
    status_code: int = 200,
    success: bool = True,
    **extra: Any,
) -> dict:
    body: dict = {"success": success, "message": message}
    if data is not None:
        body["data"] = data
    body.update(extra)
    body["statusCode"] = status_code
    return body


def respond(message: str, data: Any = None, status_code: int = 200) -> JSONResponse:
    """Build an envelope response; pydantic payloads are dumped with their aliases."""
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            envelope(message, data, status_code, success=status_code < 400), by_alias=True
        ),
    )
