"""Error envelope and toast schemas

The backend reports failures (and many successes) in a "5W1H" shape:
what / why / who / where / when / how, plus optional follow-up actions.
Anything else is reduced to a generic message.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaError


class ToastAction(BaseModel):
    """Follow-up action offered with a notification"""
    label: str
    action: str
    params: Dict[str, Any] = {}


class StructuredServerError(BaseModel):
    """5W1H envelope"""
    kind: Literal["structured"] = "structured"
    what: str
    why: Optional[str] = None
    who: Optional[str] = None
    where: Optional[str] = None
    when: Optional[str] = None
    how: Optional[str] = None
    actions: List[ToastAction] = []

    @property
    def summary(self) -> str:
        return f"{self.what}: {self.why}" if self.why else self.what


class GenericError(BaseModel):
    """Fallback for any unrecognized error body"""
    kind: Literal["generic"] = "generic"
    message: str

    @property
    def summary(self) -> str:
        return self.message


ErrorEnvelope = Annotated[
    Union[StructuredServerError, GenericError],
    Field(discriminator="kind"),
]


def envelope_kind(data: Any) -> str:
    """Classify a raw response body.

    A body is structured only when its ``what`` field is a non-empty string.
    """
    if isinstance(data, dict):
        what = data.get("what")
        if isinstance(what, str) and what.strip():
            return "structured"
    return "generic"


def _generic_message(data: Any, status: Optional[int]) -> str:
    if isinstance(data, dict):
        for key in ("detail", "message"):
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value
            if isinstance(value, list) and value:
                # FastAPI-style validation detail
                return "; ".join(
                    str(item.get("msg", item)) if isinstance(item, dict) else str(item)
                    for item in value
                )
    if isinstance(data, str) and data.strip():
        return data
    return f"Error {status}" if status else "Something went wrong"


def parse_error_envelope(data: Any, status: Optional[int] = None) -> ErrorEnvelope:
    """Turn a raw response body into a tagged envelope"""
    if envelope_kind(data) == "structured":
        payload = {k: v for k, v in data.items() if k != "kind"}
        try:
            return StructuredServerError.model_validate(payload)
        except SchemaError:
            pass
    return GenericError(message=_generic_message(data, status))


class Toast(BaseModel):
    """A notification waiting to be shown"""
    id: str
    status: Literal["success", "error", "warning", "info"] = "info"
    title: str = "Notification"
    description: str = ""
    who: Optional[str] = None
    where: Optional[str] = None
    when: Optional[str] = None
    how: Optional[str] = None
    actions: List[ToastAction] = []
    duration: float
    created_at: float

    @property
    def expires_at(self) -> Optional[float]:
        if self.duration <= 0:
            return None
        return self.created_at + self.duration
