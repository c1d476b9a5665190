"""Shared request/response model bases.

Wire format is camelCase; Python attributes stay snake_case.
"""

from typing import Annotated
from urllib.parse import urlsplit

from fastapi import Query
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from blink.services.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResponseModel(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


def _check_http_url(value: str) -> str:
    parts = urlsplit(value)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError("must be an absolute http(s) URL")
    return value


HttpUrlStr = Annotated[str, Field(min_length=1, max_length=2048), AfterValidator(_check_http_url)]
RedirectIdStr = Annotated[str, Field(pattern=r"^[A-Za-z0-9_-]{1,64}$")]
NonEmptyName = Annotated[str, Field(min_length=1, max_length=255)]

PageQuery = Annotated[int, Query(ge=1)]
LimitQuery = Annotated[int, Query(ge=1, le=MAX_LIMIT)]

__all__ = [
    "CamelModel",
    "ResponseModel",
    "HttpUrlStr",
    "RedirectIdStr",
    "NonEmptyName",
    "PageQuery",
    "LimitQuery",
    "DEFAULT_PAGE",
    "DEFAULT_LIMIT",
]
