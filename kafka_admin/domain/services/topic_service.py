"""Topic create/alter/delete/read against the cluster controller."""
from __future__ import annotations

import logging
from typing import Dict, List

from kafka import errors as Errors

from kafka_admin.core.exceptions import ResponseError, TopicMissingError, raise_for_errors
from kafka_admin.domain.models.topic import Topic
from kafka_admin.domain.services.config_differ import explicit_config
from kafka_admin.infra.kafka.admin import ClusterClient
from kafka_admin.infra.kafka.locator import BrokerLocator


class TopicService:
    """One request per call; nothing is cached between calls."""

    def __init__(
        self,
        cluster: ClusterClient,
        locator: BrokerLocator,
        *,
        timeout_ms: int,
        logger: logging.Logger | None = None,
    ) -> None:
        self._cluster = cluster
        self._locator = locator
        self._timeout_ms = timeout_ms
        self._log = logger or logging.getLogger(__name__)

    # ------------------------------------------------------------------ #
    # Commands                                                            #
    # ------------------------------------------------------------------ #
    def create_topic(self, topic: Topic) -> None:
        """Create *topic* with its full config map."""
        broker = self._locator.controller(self._cluster)
        self._log.debug("Timeout is %d ms", self._timeout_ms)
        errors = broker.create_topics(
            {topic.name: (topic.partitions, topic.replication_factor, dict(topic.config))},
            self._timeout_ms,
        )
        raise_for_errors(errors)
        self._log.info("Created topic %s in Kafka", topic.name)

    def update_topic(self, topic: Topic) -> None:
        """Replace the dynamic config of *topic* with ``topic.config``."""
        broker = self._locator.controller(self._cluster)
        errors = broker.alter_configs(topic.name, dict(topic.config), validate_only=False)
        raise_for_errors(errors)
        self._log.info("Updated config of topic %s", topic.name)

    def delete_topic(self, name: str) -> None:
        broker = self._locator.controller(self._cluster)
        errors = broker.delete_topics([name], self._timeout_ms)
        raise_for_errors(errors)
        self._log.info("Deleted topic %s from Kafka", name)

    def add_partitions(self, topic: Topic) -> None:
        """Grow *topic* to ``topic.partitions`` partitions."""
        broker = self._locator.controller(self._cluster)
        self._log.info("Adding partitions to %s in Kafka", topic.name)
        errors = broker.create_partitions(
            {topic.name: topic.partitions}, self._timeout_ms, validate_only=False
        )
        raise_for_errors(errors)
        self._log.info("Added partitions to %s in Kafka", topic.name)

    # ------------------------------------------------------------------ #
    # Queries                                                             #
    # ------------------------------------------------------------------ #
    def read_topic(self, name: str) -> Topic:
        """Return the materialized state of *name*.

        Raises
        ------
        TopicMissingError
            If *name* is not in the cluster's topic listing.
        """
        self._cluster.refresh_metadata()
        if name not in self._cluster.topics():
            raise TopicMissingError(name)

        partitions = self._cluster.partitions(name)
        self._log.debug("%d partitions found for %s: %s", len(partitions), name, partitions)
        if not partitions:
            raise ResponseError(name, Errors.LeaderNotAvailableError.errno)

        return Topic(
            name=name,
            partitions=len(partitions),
            replication_factor=self.replica_count(name, partitions),
            config=self.topic_config(name),
        )

    def replica_count(self, name: str, partitions: List[int]) -> int:
        """Replicas assigned to the lowest-numbered partition."""
        return len(self._cluster.replicas(name, min(partitions)))

    def topic_config(self, name: str) -> Dict[str, str]:
        """Explicitly-set config of *name*."""
        broker = self._locator.controller(self._cluster)
        result = broker.describe_configs(name)
        raise_for_errors([result.error])
        for entry in result.entries:
            self._log.debug(
                "Topic: %s. %s: %s. Default %s, Source %s, Version %d",
                name, entry.name, entry.value, entry.is_default, entry.source, result.version,
            )
        config = explicit_config(result.entries, result.version)
        self._log.debug("Config %s from Kafka", config)
        return config
