"""Topic endpoints: create, read, alter config, add partitions, delete."""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status

from kafka_admin.api.dependencies import get_kafka_service
from kafka_admin.domain.models.topic import PartitionCount, Topic
from kafka_admin.services.kafka_service import KafkaService

router = APIRouter()

TopicName = Annotated[str, Path(pattern=r"^[\w.\-]+$")]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_topic(
    topic: Topic,
    svc: KafkaService = Depends(get_kafka_service),
) -> None:
    """Create *topic* with its full config."""
    svc.create_topic(topic)


@router.get("/{name}", response_model=Topic)
def read_topic(
    name: TopicName,
    svc: KafkaService = Depends(get_kafka_service),
) -> Topic:
    """Return partitions, replication factor and non-default config."""
    return svc.read_topic(name)


@router.put("/{name}", status_code=status.HTTP_204_NO_CONTENT)
def update_topic(
    name: TopicName,
    topic: Topic,
    svc: KafkaService = Depends(get_kafka_service),
) -> None:
    """Replace the config of *name* with ``topic.config``."""
    if topic.name != name:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST, f"Body names topic {topic.name!r}, path {name!r}"
        )
    svc.update_topic(topic)


@router.post("/{name}/partitions", status_code=status.HTTP_204_NO_CONTENT)
def add_partitions(
    name: TopicName,
    body: PartitionCount,
    svc: KafkaService = Depends(get_kafka_service),
) -> None:
    """Grow *name* to ``body.partitions`` partitions."""
    current = svc.read_topic(name)
    svc.add_partitions(current.model_copy(update={"partitions": body.partitions}))


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
def delete_topic(
    name: TopicName,
    svc: KafkaService = Depends(get_kafka_service),
) -> None:
    svc.delete_topic(name)
