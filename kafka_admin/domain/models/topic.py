"""Topic model shared by the admin services and REST routes."""
from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field


class Topic(BaseModel):
    """Desired or observed state of a Kafka topic.

    ``config`` holds the full desired configuration on create/alter and only
    the explicitly-set (non-default) entries when read back from the cluster.
    """

    name: str = Field(
        ...,
        pattern=r"^[\w\-.]+$",
        max_length=249,
        examples=["payments.v1"],
        description="Letters, digits, `.`, `_` and `-`",
    )
    partitions: int = Field(..., ge=1)
    replication_factor: int = Field(..., ge=1)
    config: Dict[str, str] = Field(default_factory=dict)


class PartitionCount(BaseModel):
    """Body model for `POST /topics/{name}/partitions`."""

    partitions: int = Field(..., ge=1, description="New total partition count")

