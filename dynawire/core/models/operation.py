from dataclasses import dataclass, field
from typing import Any

NAMESPACE = "DynamoDB_20120810"
CONTENT_TYPE = "application/x-amz-json-1.0"


@dataclass
class Operation:
    """
    A fully built request, ready to be handed to a Transport.
    The payload only contains JSON-serializable values: every attribute
    value has already been encoded into its tagged wire form.
    """
    name: str
    """
    CamelCase operation name, e.g. "PutItem".
    """

    data: dict[str, Any]
    """
    JSON payload of the request.
    """

    headers: list[tuple[str, str]] = field(default_factory=list)
    """
    Headers identifying the operation for the service.
    """

    @classmethod
    def build(cls, name: str, data: dict[str, Any]) -> "Operation":
        return cls(
            name=name,
            data=data,
            headers=[
                ("x-amz-target", f"{NAMESPACE}.{name}"),
                ("content-type", CONTENT_TYPE),
            ],
        )

    @property
    def target(self) -> str:
        return f"{NAMESPACE}.{self.name}"
