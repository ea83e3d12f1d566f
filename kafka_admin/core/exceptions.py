"""Error types raised by the admin client.

Transport failures are left as the ``kafka.errors`` classes raised by
kafka-python; everything below is raised by this package itself.
"""
from __future__ import annotations

from typing import Iterable, Optional

from kafka import errors as Errors


class AdminError(Exception):
    """Base class for admin-client failures."""


class ConfigurationError(AdminError, ValueError):
    """Raised when connection settings cannot be turned into a client config."""


class NoAvailableBrokersError(AdminError):
    """Raised when none of the bootstrap addresses accepted a connection."""

    def __init__(self, addresses: Iterable[str]) -> None:
        self.addresses = list(addresses)
        super().__init__(f"No available brokers @ {self.addresses}")


class ResponseError(AdminError):
    """A delivered response carried a non-zero error code for *resource*.

    Attributes
    ----------
    resource : str
        Topic name, resource type or ACL description the code belongs to.
    error_code : int
        Raw Kafka protocol error code.
    error : type[kafka.errors.KafkaError]
        The kafka-python error class registered for *error_code*.
    error_message : str | None
        Broker-supplied message, when the response version carries one.
    """

    def __init__(
        self,
        resource: str,
        error_code: int,
        error_message: Optional[str] = None,
    ) -> None:
        self.resource = resource
        self.error_code = error_code
        self.error = Errors.for_code(error_code)
        self.error_message = error_message
        detail = error_message or self.error.description
        super().__init__(f"{resource} : {self.error.message}: {detail}")


class TopicMissingError(AdminError):
    """The topic does not exist in the cluster metadata."""

    def __init__(self, topic: str) -> None:
        self.topic = topic
        super().__init__(f"{topic} could not be found")


class ACLValidationError(AdminError, ValueError):
    """A string-typed ACL field is outside its vocabulary."""

    def __init__(self, field: str, value: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Unknown {field}: '{value}'")


def raise_for_errors(items: Iterable) -> None:
    """Raise ResponseError for the first item whose code is not NO_ERROR.

    *items* are ``(name, code, message)`` records as returned by ``Broker``.
    """
    for item in items:
        if item.code != Errors.NoError.errno:
            raise ResponseError(item.name, item.code, item.message)
