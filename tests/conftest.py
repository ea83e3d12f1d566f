"""Shared fixtures: in-memory stand-ins for brokers and the cluster client."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import pytest

from kafka_admin.core.config import ConnectionConfig
from kafka_admin.infra.kafka.broker import DescribeACLsResult, DescribeConfigsResult, ItemError

FIXTURES = Path(__file__).parent / "fixtures"


class FakeBroker:
    """Records every call and replies with canned results."""

    def __init__(self, address: str = "controller:9092") -> None:
        self.address = address
        self.calls: List[tuple] = []
        self.closed = False
        self.item_errors: List[ItemError] | None = None
        self.describe_configs_result: DescribeConfigsResult | None = None
        self.describe_acls_results: List[DescribeACLsResult] = []

    def _reply(self, name: str) -> List[ItemError]:
        if self.item_errors is not None:
            return self.item_errors
        return [ItemError(name, 0, None)]

    def close(self) -> None:
        self.closed = True

    def create_topics(self, topics, timeout_ms):
        self.calls.append(("create_topics", topics, timeout_ms))
        return self._reply(next(iter(topics)))

    def delete_topics(self, names, timeout_ms):
        self.calls.append(("delete_topics", list(names), timeout_ms))
        return self._reply(names[0])

    def create_partitions(self, counts, timeout_ms, validate_only=False):
        self.calls.append(("create_partitions", counts, timeout_ms, validate_only))
        return self._reply(next(iter(counts)))

    def alter_configs(self, topic, config, validate_only=False):
        self.calls.append(("alter_configs", topic, config, validate_only))
        return self._reply(topic)

    def describe_configs(self, topic):
        self.calls.append(("describe_configs", topic))
        return self.describe_configs_result

    def create_acls(self, creations):
        self.calls.append(("create_acls", list(creations)))
        return self._reply(creations[0].resource_name)

    def delete_acls(self, filters):
        self.calls.append(("delete_acls", list(filters)))
        return self._reply(filters[0].resource_name)

    def describe_acls(self, acl_filter):
        self.calls.append(("describe_acls", acl_filter))
        return self.describe_acls_results.pop(0)


class FakeCluster:
    """ClusterClient stand-in holding topic -> {partition: replicas}."""

    def __init__(self, topics: Dict[str, Dict[int, List[int]]] | None = None) -> None:
        self._topology = topics or {}
        self.controller_broker = FakeBroker()
        self.refreshes = 0

    def refresh_metadata(self) -> None:
        self.refreshes += 1

    def topics(self) -> List[str]:
        return list(self._topology)

    def partitions(self, topic: str) -> List[int]:
        return sorted(self._topology[topic])

    def replicas(self, topic: str, partition: int) -> List[int]:
        return self._topology[topic][partition]

    def controller(self) -> FakeBroker:
        return self.controller_broker


class FakeLocator:
    def __init__(self, broker: FakeBroker | None = None) -> None:
        self.broker = broker or FakeBroker("bootstrap:9092")
        self.lookups = 0

    def controller(self, cluster):
        return cluster.controller()

    def available_broker(self) -> FakeBroker:
        self.lookups += 1
        return self.broker


@pytest.fixture
def config() -> ConnectionConfig:
    return ConnectionConfig(bootstrap_servers=["localhost:9092"], timeout=30)


@pytest.fixture
def cluster() -> FakeCluster:
    return FakeCluster({"orders": {0: [1, 2, 3], 1: [2, 3, 1], 2: [3, 1, 2]}})


@pytest.fixture
def locator() -> FakeLocator:
    return FakeLocator()
