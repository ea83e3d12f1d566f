from __future__ import annotations

import logging
import threading
from typing import List, Optional

from kafka_admin.core.config import ConnectionConfig, get_settings
from kafka_admin.domain.models.acl import ResourceACLs, StringlyTypedACL
from kafka_admin.domain.models.topic import Topic
from kafka_admin.domain.services.acl_service import ACLService
from kafka_admin.domain.services.topic_service import TopicService
from kafka_admin.infra.kafka.admin import ClusterClient
from kafka_admin.infra.kafka.locator import BrokerLocator


class KafkaService:
    """
    Lazy adapter exposing the topic and ACL admin operations.
    Avoids network work at construction; the shared cluster client is opened
    on first use and reused until :meth:`close`. Failures are not retried.

    Thread-safe: calls are serialized on one lock, since the shared cluster
    client and its metadata are not.
    """

    def __init__(
        self,
        config: Optional[ConnectionConfig] = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config or get_settings()
        self._log = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()
        self._cluster: ClusterClient | None = None
        self._topics: TopicService | None = None
        self._acls: ACLService | None = None

    def __enter__(self) -> "KafkaService":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _ensure_cluster(self) -> ClusterClient:
        with self._lock:
            if self._cluster is not None:
                return self._cluster
            cluster = ClusterClient.open(self.config, logger=self._log)
            locator = BrokerLocator(
                self.config, client_config=cluster.client_config, logger=self._log
            )
            self._topics = TopicService(
                cluster, locator, timeout_ms=self.config.timeout * 1000, logger=self._log
            )
            self._acls = ACLService(cluster, locator, logger=self._log)
            self._cluster = cluster
            return cluster

    def close(self) -> None:
        with self._lock:
            if self._cluster is not None:
                self._cluster.close()
            self._cluster = self._topics = self._acls = None

    # ---------- Topics ----------
    def create_topic(self, topic: Topic) -> None:
        with self._lock:
            self._ensure_cluster()
            self._topics.create_topic(topic)

    def update_topic(self, topic: Topic) -> None:
        with self._lock:
            self._ensure_cluster()
            self._topics.update_topic(topic)

    def delete_topic(self, name: str) -> None:
        with self._lock:
            self._ensure_cluster()
            self._topics.delete_topic(name)

    def add_partitions(self, topic: Topic) -> None:
        with self._lock:
            self._ensure_cluster()
            self._topics.add_partitions(topic)

    def read_topic(self, name: str) -> Topic:
        with self._lock:
            self._ensure_cluster()
            return self._topics.read_topic(name)

    # ---------- ACLs ----------
    def create_acl(self, acl: StringlyTypedACL) -> None:
        with self._lock:
            self._ensure_cluster()
            self._acls.create_acl(acl)

    def delete_acl(self, acl: StringlyTypedACL) -> None:
        with self._lock:
            self._ensure_cluster()
            self._acls.delete_acl(acl)

    def list_acls(self) -> List[ResourceACLs]:
        with self._lock:
            self._ensure_cluster()
            return self._acls.list_acls()
