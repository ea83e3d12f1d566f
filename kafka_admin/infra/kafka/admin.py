"""Long-lived cluster client built on kafka-python's ``KafkaClient``."""
from __future__ import annotations

import logging
from typing import Dict, List, NamedTuple, Optional

from kafka import KafkaClient
from kafka import errors as Errors
from kafka.protocol.metadata import MetadataRequest

from kafka_admin.core.config import ConnectionConfig
from kafka_admin.infra.kafka.broker import Broker


class BrokerInfo(NamedTuple):
    node_id: int
    host: str
    port: int


class TopicMetadata(NamedTuple):
    error_code: int
    partitions: Dict[int, List[int]]  # partition id -> replica node ids


class ClusterClient:
    """Shared handle for controller lookup and topology queries.

    The topology returned by :meth:`topics`, :meth:`partitions` and
    :meth:`replicas` is the one fetched by the last :meth:`refresh_metadata`.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        *,
        client: KafkaClient | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.client_config = config.derive_client_config()
        self._log = logger or logging.getLogger(__name__)
        self._client = client or KafkaClient(**self.client_config)
        self._bootstrap = Broker(
            self._client,
            None,
            address=",".join(config.bootstrap_servers),
            timeout_ms=self.client_config["request_timeout_ms"],
        )
        self._brokers: Dict[int, BrokerInfo] = {}
        self._controller_id: Optional[int] = None
        self._topics: Dict[str, TopicMetadata] = {}

    @classmethod
    def open(cls, config: ConnectionConfig, **kw) -> "ClusterClient":
        """Build the client and complete the metadata handshake."""
        cluster = cls(config, **kw)
        try:
            cluster.refresh_metadata()
        except Exception:
            cluster.close()
            raise
        return cluster

    def close(self) -> None:
        self._client.close()

    # ---------- metadata ----------
    def refresh_metadata(self) -> None:
        node_id = self._client.least_loaded_node()
        if node_id is None:
            raise Errors.NoBrokersAvailable(self.config.bootstrap_servers)
        self._bootstrap.node_id = node_id
        response = self._bootstrap.send(MetadataRequest[1](topics=None))
        # keep the client's own routing table in step so node ids resolve
        self._client.cluster.update_metadata(response)

        self._brokers = {
            node: BrokerInfo(node, host, port) for node, host, port, *_ in response.brokers
        }
        self._controller_id = response.controller_id
        self._topics = {}
        for error_code, topic, _internal, partitions in response.topics:
            self._topics[topic] = TopicMetadata(
                error_code,
                {p[1]: list(p[3]) for p in partitions},
            )
        self._log.debug(
            "Metadata: %d brokers, controller %s, %d topics",
            len(self._brokers), self._controller_id, len(self._topics),
        )

    def topics(self) -> List[str]:
        return list(self._topics)

    def partitions(self, topic: str) -> List[int]:
        meta = self._topics.get(topic)
        if meta is None:
            raise Errors.UnknownTopicOrPartitionError(topic)
        if meta.error_code != Errors.NoError.errno:
            raise Errors.for_code(meta.error_code)(topic)
        return sorted(meta.partitions)

    def replicas(self, topic: str, partition: int) -> List[int]:
        meta = self._topics.get(topic)
        if meta is None or partition not in meta.partitions:
            raise Errors.UnknownTopicOrPartitionError(f"{topic}-{partition}")
        return list(meta.partitions[partition])

    # ---------- brokers ----------
    def controller(self) -> Broker:
        """Return the controller broker, re-reading metadata first."""
        self.refresh_metadata()
        info = self._brokers.get(self._controller_id) if self._controller_id is not None else None
        if info is None:
            raise Errors.BrokerNotAvailableError(
                f"No controller in cluster metadata (controller_id={self._controller_id})"
            )
        return Broker(
            self._client,
            info.node_id,
            address=f"{info.host}:{info.port}",
            timeout_ms=self.client_config["request_timeout_ms"],
        )
