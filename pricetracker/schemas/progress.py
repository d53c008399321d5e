"""Progress event schemas pushed to the presentation layer.

Every event carries a Spanish, human-readable ``message`` plus the
structured fields for its variant. JSON output uses camelCase keys
(``totalCount``, ``currentIndex``) so the browser client can consume
the stream as-is.
"""

from typing import Annotated, Any, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class _EventBase(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    message: str

    def to_sse(self) -> str:
        """Render the event as a server-sent-events frame."""
        return f"data: {self.model_dump_json(by_alias=True)}\n\n"


class ConnectedEvent(_EventBase):
    """Synthetic acknowledgment sent to a listener when it subscribes."""

    type: Literal["connected"] = "connected"
    message: str = "Conectado al canal de progreso"


class StartedEvent(_EventBase):
    type: Literal["started"] = "started"
    total_count: int


class ProgressUpdateEvent(_EventBase):
    type: Literal["progress"] = "progress"
    current_index: int
    total_count: int
    source: str


class SuccessEvent(_EventBase):
    type: Literal["success"] = "success"
    source: str
    data: Dict[str, Any]


class ErrorEvent(_EventBase):
    type: Literal["error"] = "error"
    source: str
    error: str


class CompletedEvent(_EventBase):
    type: Literal["completed"] = "completed"
    results: List[Dict[str, Any]]
    success_count: int
    error_count: int
    cancelled: bool = False


ProgressEvent = Annotated[
    Union[
        ConnectedEvent,
        StartedEvent,
        ProgressUpdateEvent,
        SuccessEvent,
        ErrorEvent,
        CompletedEvent,
    ],
    Field(discriminator="type"),
]

progress_event_adapter: TypeAdapter = TypeAdapter(ProgressEvent)


def parse_event(payload: Dict[str, Any]) -> _EventBase:
    """Rebuild a typed event from its JSON payload (camelCase or snake_case)."""
    return progress_event_adapter.validate_python(payload)
