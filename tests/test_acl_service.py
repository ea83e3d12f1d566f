import pytest
from kafka import errors as Errors

from kafka_admin.core.exceptions import ACLValidationError, NoAvailableBrokersError, ResponseError
from kafka_admin.domain.models.acl import (
    ACL,
    ACLOperation,
    ACLPatternType,
    ACLPermissionType,
    ACLResourceType,
    Resource,
    StringlyTypedACL,
)
from kafka_admin.domain.services.acl_service import ACLService
from kafka_admin.infra.kafka.broker import DescribeACLsResult, DescribedResource, ItemError


@pytest.fixture
def service(cluster, locator):
    return ACLService(cluster, locator)


def _acl(operation="Write", pattern="literal"):
    return StringlyTypedACL(
        acl=ACL(principal="User:bob", host="*", operation=operation, permission_type="Allow"),
        resource=Resource(type="Topic", name="orders", pattern_type_filter=pattern),
    )


def _ok(*resources):
    return DescribeACLsResult(0, None, list(resources))


# ---------- create / delete ----------

def test_create_acl(service, locator):
    service.create_acl(_acl(pattern="prefixed"))

    (name, creations), = locator.broker.calls
    assert name == "create_acls"
    assert creations[0].pattern_type is ACLPatternType.PREFIXED
    assert creations[0].operation is ACLOperation.WRITE
    assert locator.broker.closed


def test_create_acl_failure_closes_broker(service, locator):
    locator.broker.item_errors = [
        ItemError("orders", Errors.SecurityDisabledError.errno, "No Authorizer is configured"),
    ]
    with pytest.raises(ResponseError, match="No Authorizer is configured"):
        service.create_acl(_acl())
    assert locator.broker.closed


def test_invalid_acl_never_touches_a_broker(service, locator):
    with pytest.raises(ACLValidationError):
        service.create_acl(_acl(operation="Fly"))
    with pytest.raises(ACLValidationError):
        service.delete_acl(_acl(pattern="glob"))
    assert locator.lookups == 0


def test_delete_acl_uses_exact_filter(service, locator):
    service.delete_acl(_acl())

    (name, filters), = locator.broker.calls
    assert name == "delete_acls"
    f = filters[0]
    assert (f.resource_type, f.resource_name, f.pattern_type) == (
        ACLResourceType.TOPIC, "orders", ACLPatternType.LITERAL,
    )
    assert (f.principal, f.host, f.operation, f.permission_type) == (
        "User:bob", "*", ACLOperation.WRITE, ACLPermissionType.ALLOW,
    )
    assert locator.broker.closed


def test_delete_acl_failure(service, locator):
    locator.broker.item_errors = [ItemError("orders", Errors.ClusterAuthorizationFailedError.errno)]
    with pytest.raises(ResponseError) as info:
        service.delete_acl(_acl())
    assert info.value.error is Errors.ClusterAuthorizationFailedError
    assert locator.broker.closed


def test_no_broker_available(service, locator):
    def unavailable():
        raise NoAvailableBrokersError(["a:1"])

    locator.available_broker = unavailable
    with pytest.raises(NoAvailableBrokersError):
        service.create_acl(_acl())


# ---------- list ----------

def test_list_acls_queries_each_resource_type_in_order(service, cluster, locator):
    locator.broker.describe_acls_results = [
        _ok(
            DescribedResource(2, "orders", 3, [("User:bob", "*", 4, 3)]),
            DescribedResource(2, "pay-", 4, [("User:eve", "10.0.0.1", 3, 2)]),
        ),
        _ok(DescribedResource(3, "billing", 3, [("User:bob", "*", 8, 3)])),
        _ok(),
        _ok(DescribedResource(5, "tx-1", 3, [("User:bob", "*", 99, 3)])),
    ]

    result = service.list_acls()

    filters = [call[1] for call in locator.broker.calls]
    assert [f.resource_type for f in filters] == [
        ACLResourceType.TOPIC,
        ACLResourceType.GROUP,
        ACLResourceType.CLUSTER,
        ACLResourceType.TRANSACTIONAL_ID,
    ]
    for f in filters:
        assert f.pattern_type is ACLPatternType.ANY
        assert f.operation is ACLOperation.ANY
        assert f.permission_type is ACLPermissionType.ANY
        assert f.resource_name is None and f.principal is None and f.host is None

    assert [(r.resource.type, r.resource.name, r.resource.pattern_type_filter) for r in result] == [
        ("Topic", "orders", "literal"),
        ("Topic", "pay-", "prefixed"),
        ("Group", "billing", "literal"),
        ("TransactionalID", "tx-1", "literal"),
    ]
    assert str(result[1].to_stringly()[0]) == "User:eve|10.0.0.1|Read|Deny|Topic|pay-|prefixed"
    assert result[2].acls[0].operation == "Describe"
    # unrecognized wire values render as Unknown
    assert result[3].acls[0].operation == "Unknown"
    assert cluster.refreshes == 1
    assert locator.broker.closed


def test_list_acls_aborts_on_first_failure(service, locator):
    locator.broker.describe_acls_results = [
        _ok(DescribedResource(2, "orders", 3, [("User:bob", "*", 4, 3)])),
        DescribeACLsResult(Errors.SecurityDisabledError.errno, "No Authorizer is configured", []),
        _ok(),
        _ok(),
    ]

    with pytest.raises(ResponseError) as info:
        service.list_acls()

    assert info.value.resource == "Group"
    assert info.value.error_message == "No Authorizer is configured"
    assert len(locator.broker.calls) == 2
    assert locator.broker.closed
