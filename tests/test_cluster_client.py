import pytest
from kafka import errors as Errors
from kafka.future import Future
from kafka.protocol.metadata import MetadataRequest, MetadataResponse

from kafka_admin.infra.kafka.admin import ClusterClient


def _metadata(controller_id=2, topics=None):
    if topics is None:
        topics = [
            (0, "orders", False, [
                (0, 1, 2, [2, 1, 3], [2, 1, 3]),
                (0, 0, 1, [1, 2, 3], [1, 2, 3]),
            ]),
            (3, "gone", False, []),
        ]
    return MetadataResponse[1](
        brokers=[(1, "b1", 9092, None), (2, "b2", 9092, "rack-a")],
        controller_id=controller_id,
        topics=topics,
    )


class FakeClusterMetadata:
    def __init__(self):
        self.updates = []

    def update_metadata(self, response):
        self.updates.append(response)


class FakeKafkaClient:
    def __init__(self, *responses, node=0):
        self.responses = list(responses)
        self.requests = []
        self.node = node
        self.cluster = FakeClusterMetadata()
        self.closed = False

    def least_loaded_node(self):
        return self.node

    def ready(self, node_id):
        return True

    def connection_failed(self, node_id):
        return False

    def poll(self, timeout_ms=None, future=None):
        return []

    def send(self, node_id, request):
        self.requests.append((node_id, request))
        return Future().success(self.responses.pop(0))

    def close(self):
        self.closed = True


def _open(config, *responses, **kw):
    client = FakeKafkaClient(*responses, **kw)
    return ClusterClient.open(config, client=client), client


def test_open_performs_metadata_handshake(config):
    response = _metadata()
    cluster, client = _open(config, response)

    node, request = client.requests[0]
    assert node == 0
    assert isinstance(request, MetadataRequest[1])
    assert request.topics is None
    assert client.cluster.updates == [response]
    assert cluster.client_config["client_id"] == "kafka-admin-client"


def test_open_closes_client_when_no_node_is_known(config):
    client = FakeKafkaClient(node=None)

    with pytest.raises(Errors.NoBrokersAvailable):
        ClusterClient.open(config, client=client)
    assert client.closed


def test_topology(config):
    cluster, _ = _open(config, _metadata())

    assert cluster.topics() == ["orders", "gone"]
    assert cluster.partitions("orders") == [0, 1]
    assert cluster.replicas("orders", 0) == [1, 2, 3]
    assert cluster.replicas("orders", 1) == [2, 1, 3]


def test_unknown_topic_or_partition(config):
    cluster, _ = _open(config, _metadata())

    with pytest.raises(Errors.UnknownTopicOrPartitionError):
        cluster.partitions("payments")
    with pytest.raises(Errors.UnknownTopicOrPartitionError):
        cluster.replicas("orders", 7)


def test_topic_error_code_is_raised(config):
    cluster, _ = _open(config, _metadata())

    with pytest.raises(Errors.UnknownTopicOrPartitionError):
        cluster.partitions("gone")


def test_controller_rereads_metadata(config):
    cluster, client = _open(config, _metadata(), _metadata(controller_id=1))

    broker = cluster.controller()

    assert len(client.requests) == 2
    assert broker.node_id == 1
    assert broker.address == "b1:9092"
    broker.close()
    assert not client.closed


def test_no_controller_in_metadata(config):
    cluster, _ = _open(config, _metadata(), _metadata(controller_id=-1))

    with pytest.raises(Errors.BrokerNotAvailableError):
        cluster.controller()


def test_close(config):
    cluster, client = _open(config, _metadata())
    cluster.close()
    assert client.closed
