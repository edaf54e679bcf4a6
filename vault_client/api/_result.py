"""
Classification of decoded Vault response bodies.

Every response is decided once into one of four variants. Only an
explicit ``responseStatus == "SUCCESS"`` counts as success.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

SUCCESS_STATUS = "SUCCESS"


@dataclass(frozen=True)
class Success:
    body: Dict[str, Any]


@dataclass(frozen=True)
class ErrorMessage:
    text: str


@dataclass(frozen=True)
class ErrorList:
    errors: List[Any] = field(default_factory=list)


@dataclass(frozen=True)
class UnknownFailure:
    pass


Result = Union[Success, ErrorMessage, ErrorList, UnknownFailure]


def classify(body: Any) -> Result:
    """Decide which result variant a response body represents."""
    if not isinstance(body, dict):
        return UnknownFailure()

    if body.get("responseStatus") == SUCCESS_STATUS:
        return Success(body)

    if body.get("responseMessage") is not None:
        return ErrorMessage(str(body["responseMessage"]))

    if "errors" in body:
        errors = body["errors"]
        if errors is None:
            return ErrorList([])
        return ErrorList(list(errors) if isinstance(errors, (list, tuple)) else [errors])

    return UnknownFailure()


def format_args(**kwargs: Any) -> str:
    """Render identifying arguments as ``"a = 1, b = 2"``."""
    return ", ".join(f"{key} = {value}" for key, value in kwargs.items())
