"""String <-> protocol enumeration mapping for ACL payloads.

Each ``parse_*`` function is total: strings outside the vocabulary map to the
enumeration's ``UNRECOGNIZED`` member instead of raising. ``build_creation``
and ``build_filter`` turn that sentinel into an ``ACLValidationError`` for the
first offending field.
"""
from __future__ import annotations

from typing import Dict, Mapping, TypeVar

from kafka_admin.core.exceptions import ACLValidationError
from kafka_admin.domain.models.acl import (
    ACLCreation,
    ACLFilter,
    ACLOperation,
    ACLPatternType,
    ACLPermissionType,
    ACLResourceType,
    StringlyTypedACL,
)

E = TypeVar("E", ACLOperation, ACLPermissionType, ACLResourceType, ACLPatternType)

OPERATIONS: Dict[str, ACLOperation] = {
    "Unknown": ACLOperation.UNKNOWN,
    "Any": ACLOperation.ANY,
    "All": ACLOperation.ALL,
    "Read": ACLOperation.READ,
    "Write": ACLOperation.WRITE,
    "Create": ACLOperation.CREATE,
    "Delete": ACLOperation.DELETE,
    "Alter": ACLOperation.ALTER,
    "Describe": ACLOperation.DESCRIBE,
    "ClusterAction": ACLOperation.CLUSTER_ACTION,
    "DescribeConfigs": ACLOperation.DESCRIBE_CONFIGS,
    "AlterConfigs": ACLOperation.ALTER_CONFIGS,
    "IdempotentWrite": ACLOperation.IDEMPOTENT_WRITE,
}

PERMISSION_TYPES: Dict[str, ACLPermissionType] = {
    "Unknown": ACLPermissionType.UNKNOWN,
    "Any": ACLPermissionType.ANY,
    "Deny": ACLPermissionType.DENY,
    "Allow": ACLPermissionType.ALLOW,
}

RESOURCE_TYPES: Dict[str, ACLResourceType] = {
    "Unknown": ACLResourceType.UNKNOWN,
    "Any": ACLResourceType.ANY,
    "Topic": ACLResourceType.TOPIC,
    "Group": ACLResourceType.GROUP,
    "Cluster": ACLResourceType.CLUSTER,
    "TransactionalID": ACLResourceType.TRANSACTIONAL_ID,
}

PATTERN_TYPES: Dict[str, ACLPatternType] = {
    "any": ACLPatternType.ANY,
    "match": ACLPatternType.MATCH,
    "literal": ACLPatternType.LITERAL,
    "prefixed": ACLPatternType.PREFIXED,
}


def _parse(vocabulary: Mapping[str, E], value: str, unrecognized: E) -> E:
    return vocabulary.get(value, unrecognized)


def _name(vocabulary: Mapping[str, E], value: E, fallback: str) -> str:
    for name, member in vocabulary.items():
        if member == value:
            return name
    return fallback


def parse_operation(value: str) -> ACLOperation:
    return _parse(OPERATIONS, value, ACLOperation.UNRECOGNIZED)


def parse_permission_type(value: str) -> ACLPermissionType:
    return _parse(PERMISSION_TYPES, value, ACLPermissionType.UNRECOGNIZED)


def parse_resource_type(value: str) -> ACLResourceType:
    return _parse(RESOURCE_TYPES, value, ACLResourceType.UNRECOGNIZED)


def parse_pattern_type(value: str) -> ACLPatternType:
    return _parse(PATTERN_TYPES, value, ACLPatternType.UNRECOGNIZED)


def operation_name(value: ACLOperation) -> str:
    return _name(OPERATIONS, value, "Unknown")


def permission_type_name(value: ACLPermissionType) -> str:
    return _name(PERMISSION_TYPES, value, "Unknown")


def resource_type_name(value: ACLResourceType) -> str:
    return _name(RESOURCE_TYPES, value, "Unknown")


def pattern_type_name(value: ACLPatternType) -> str:
    # no lowercase "unknown" keyword exists, so this never parses back
    return _name(PATTERN_TYPES, value, "unknown")


def _require(member: E, field: str, value: str) -> E:
    if member is type(member).UNRECOGNIZED:
        raise ACLValidationError(field, value)
    return member


def build_creation(s: StringlyTypedACL) -> ACLCreation:
    """Translate *s* into a CreateAcls record.

    Raises
    ------
    ACLValidationError
        For the first of operation, permission type, resource type or
        pattern type that is outside its vocabulary.
    """
    op = _require(parse_operation(s.acl.operation), "operation", s.acl.operation)
    permission = _require(
        parse_permission_type(s.acl.permission_type), "permission type", s.acl.permission_type
    )
    rtype = _require(parse_resource_type(s.resource.type), "resource type", s.resource.type)
    pattern = _require(
        parse_pattern_type(s.resource.pattern_type_filter),
        "pattern type filter",
        s.resource.pattern_type_filter,
    )
    return ACLCreation(
        resource_type=rtype,
        resource_name=s.resource.name,
        pattern_type=pattern,
        principal=s.acl.principal,
        host=s.acl.host,
        operation=op,
        permission_type=permission,
    )


def build_filter(s: StringlyTypedACL) -> ACLFilter:
    """Translate *s* into a filter matching exactly that ACL."""
    op = _require(parse_operation(s.acl.operation), "operation", s.acl.operation)
    permission = _require(
        parse_permission_type(s.acl.permission_type), "permission type", s.acl.permission_type
    )
    rtype = _require(parse_resource_type(s.resource.type), "resource type", s.resource.type)
    pattern = _require(
        parse_pattern_type(s.resource.pattern_type_filter),
        "pattern type filter",
        s.resource.pattern_type_filter,
    )
    return ACLFilter(
        resource_type=rtype,
        resource_name=s.resource.name,
        pattern_type=pattern,
        principal=s.acl.principal,
        host=s.acl.host,
        operation=op,
        permission_type=permission,
    )
