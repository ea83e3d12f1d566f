"""Single-node request handle on top of kafka-python's ``KafkaClient``.

Each method sends one pinned-version request and flattens the response into
small tuples, leaving error-code interpretation to the domain services.
"""
from __future__ import annotations

from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from kafka import KafkaClient
from kafka import errors as Errors
from kafka.protocol.admin import (
    AlterConfigsRequest,
    CreateAclsRequest,
    CreatePartitionsRequest,
    CreateTopicsRequest,
    DeleteAclsRequest,
    DeleteTopicsRequest,
    DescribeAclsRequest,
    DescribeConfigsRequest,
)

from kafka_admin.domain.models.acl import ACLCreation, ACLFilter

# DescribeConfigs/AlterConfigs resource type for topics
TOPIC_RESOURCE = 2


class ItemError(NamedTuple):
    """Per-topic / per-resource / per-ACL outcome embedded in a response."""

    name: str
    code: int
    message: Optional[str] = None


class ConfigSynonym(NamedTuple):
    name: str
    value: Optional[str]
    source: int


class ConfigEntry(NamedTuple):
    name: str
    value: Optional[str]
    read_only: bool = False
    is_default: Optional[bool] = None
    source: Optional[int] = None
    is_sensitive: bool = False
    synonyms: Tuple[ConfigSynonym, ...] = ()


class DescribeConfigsResult(NamedTuple):
    version: int
    error: ItemError
    entries: List[ConfigEntry]


class DescribedResource(NamedTuple):
    resource_type: int
    resource_name: str
    pattern_type: int
    acls: List[Tuple[str, str, int, int]]  # principal, host, operation, permission


class DescribeACLsResult(NamedTuple):
    code: int
    message: Optional[str]
    resources: List[DescribedResource]


class Broker:
    """One Kafka node reachable through a ``KafkaClient``.

    Brokers returned by :meth:`open` own their client and must be closed;
    brokers handed out by the shared cluster client do not.
    """

    def __init__(
        self,
        client: KafkaClient,
        node_id,
        *,
        address: str | None = None,
        timeout_ms: int = 30_000,
        owns_client: bool = False,
    ) -> None:
        self._client = client
        self.node_id = node_id
        self.address = address or str(node_id)
        self._timeout_ms = timeout_ms
        self._owns_client = owns_client

    @classmethod
    def open(cls, address: str, client_config: dict) -> "Broker":
        """Connect to *address* alone and return a broker owning that connection."""
        client = KafkaClient(**{**client_config, "bootstrap_servers": [address]})
        try:
            node_id = client.least_loaded_node()
            if node_id is None:
                raise Errors.NoBrokersAvailable(address)
            broker = cls(
                client,
                node_id,
                address=address,
                timeout_ms=client_config.get("request_timeout_ms", 30_000),
                owns_client=True,
            )
            broker.await_ready()
        except Exception:
            client.close()
            raise
        return broker

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __repr__(self) -> str:
        return f"Broker(node_id={self.node_id!r}, address={self.address!r})"

    # ---------- plumbing ----------
    def await_ready(self) -> None:
        """Drive the connection to *node_id* until it can take a request.

        kafka-python gives up on a connect attempt after ``request_timeout_ms``
        and marks the node failed, which ends the wait.
        """
        while not self._client.ready(self.node_id):
            if self._client.connection_failed(self.node_id):
                raise Errors.KafkaConnectionError(f"Unable to connect to {self.address}")
            self._client.poll(timeout_ms=200)

    def send(self, request):
        """Send *request* and block until its response arrives."""
        self.await_ready()
        future = self._client.send(self.node_id, request)
        self._client.poll(future=future, timeout_ms=self._timeout_ms)
        if not future.is_done:
            raise Errors.KafkaTimeoutError(
                f"{type(request).__name__} to {self.address} timed out"
            )
        if future.failed():
            raise future.exception
        return future.value

    # ---------- topics ----------
    def create_topics(
        self, topics: Dict[str, Tuple[int, int, Dict[str, str]]], timeout_ms: int
    ) -> List[ItemError]:
        request = CreateTopicsRequest[1](
            create_topic_requests=[
                (name, partitions, replication_factor, [], list(config.items()))
                for name, (partitions, replication_factor, config) in topics.items()
            ],
            timeout=timeout_ms,
            validate_only=False,
        )
        response = self.send(request)
        return [ItemError(*e[:3]) for e in response.topic_errors]

    def delete_topics(self, names: Sequence[str], timeout_ms: int) -> List[ItemError]:
        request = DeleteTopicsRequest[1](topics=list(names), timeout=timeout_ms)
        response = self.send(request)
        return [ItemError(topic, code) for topic, code in response.topic_error_codes]

    def create_partitions(
        self, counts: Dict[str, int], timeout_ms: int, validate_only: bool = False
    ) -> List[ItemError]:
        request = CreatePartitionsRequest[0](
            topic_partitions=[(name, (count, None)) for name, count in counts.items()],
            timeout=timeout_ms,
            validate_only=validate_only,
        )
        response = self.send(request)
        return [ItemError(*e[:3]) for e in response.topic_errors]

    # ---------- configs ----------
    def alter_configs(
        self, topic: str, config: Dict[str, str], validate_only: bool = False
    ) -> List[ItemError]:
        request = AlterConfigsRequest[0](
            resources=[(TOPIC_RESOURCE, topic, list(config.items()))],
            validate_only=validate_only,
        )
        response = self.send(request)
        return [
            ItemError(name, code, message)
            for code, message, _rtype, name in response.resources
        ]

    def describe_configs(self, topic: str) -> DescribeConfigsResult:
        request = DescribeConfigsRequest[1](
            resources=[(TOPIC_RESOURCE, topic, None)],
            include_synonyms=True,
        )
        response = self.send(request)
        return parse_describe_configs(response)

    # ---------- ACLs ----------
    def create_acls(self, creations: Sequence[ACLCreation]) -> List[ItemError]:
        request = CreateAclsRequest[1](
            creations=[
                (
                    c.resource_type,
                    c.resource_name,
                    c.pattern_type,
                    c.principal,
                    c.host,
                    c.operation,
                    c.permission_type,
                )
                for c in creations
            ]
        )
        response = self.send(request)
        return [
            ItemError(c.resource_name, code, message)
            for c, (code, message) in zip(creations, response.creation_responses)
        ]

    def describe_acls(self, acl_filter: ACLFilter) -> DescribeACLsResult:
        request = DescribeAclsRequest[1](
            resource_type=acl_filter.resource_type,
            resource_name=acl_filter.resource_name,
            resource_pattern_type_filter=acl_filter.pattern_type,
            principal=acl_filter.principal,
            host=acl_filter.host,
            operation=acl_filter.operation,
            permission_type=acl_filter.permission_type,
        )
        response = self.send(request)
        return DescribeACLsResult(
            response.error_code,
            response.error_message,
            [DescribedResource(*r[:3], list(r[3])) for r in response.resources],
        )

    def delete_acls(self, filters: Sequence[ACLFilter]) -> List[ItemError]:
        request = DeleteAclsRequest[1](
            filters=[
                (
                    f.resource_type,
                    f.resource_name,
                    f.pattern_type,
                    f.principal,
                    f.host,
                    f.operation,
                    f.permission_type,
                )
                for f in filters
            ]
        )
        response = self.send(request)
        return [
            ItemError(f.resource_name or "", code, message)
            for f, (code, message, _matching) in zip(filters, response.filter_responses)
        ]


def parse_describe_configs(response) -> DescribeConfigsResult:
    """Flatten a DescribeConfigs response for its first (only) resource.

    Entry layout depends on the response version: v0 has an ``is_default``
    flag where v1+ has a ``config_source`` followed by synonyms.
    """
    version = response.API_VERSION
    if not response.resources:
        return DescribeConfigsResult(version, ItemError("", 0), [])
    code, message, _rtype, name, raw_entries = response.resources[0]
    entries: List[ConfigEntry] = []
    for raw in raw_entries:
        if version == 0:
            cname, value, read_only, is_default, sensitive = raw[:5]
            entries.append(ConfigEntry(cname, value, read_only, is_default=is_default,
                                       is_sensitive=sensitive))
        else:
            cname, value, read_only, source, sensitive, synonyms = raw[:6]
            entries.append(
                ConfigEntry(
                    cname,
                    value,
                    read_only,
                    source=source,
                    is_sensitive=sensitive,
                    synonyms=tuple(ConfigSynonym(*s[:3]) for s in synonyms or ()),
                )
            )
    return DescribeConfigsResult(version, ItemError(name, code, message), entries)
