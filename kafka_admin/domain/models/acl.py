"""ACL DTOs: string-typed caller payloads and validated protocol records."""
from __future__ import annotations

from enum import IntEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# --------------------------------------------------------------------------- #
# Protocol enumerations (wire values)                                          #
# --------------------------------------------------------------------------- #
class _WireEnum(IntEnum):
    """IntEnum whose lookup by an unknown wire value yields ``UNRECOGNIZED``."""

    @classmethod
    def _missing_(cls, value):
        return cls.UNRECOGNIZED


class ACLOperation(_WireEnum):
    UNRECOGNIZED = -1
    UNKNOWN = 0
    ANY = 1
    ALL = 2
    READ = 3
    WRITE = 4
    CREATE = 5
    DELETE = 6
    ALTER = 7
    DESCRIBE = 8
    CLUSTER_ACTION = 9
    DESCRIBE_CONFIGS = 10
    ALTER_CONFIGS = 11
    IDEMPOTENT_WRITE = 12


class ACLPermissionType(_WireEnum):
    UNRECOGNIZED = -1
    UNKNOWN = 0
    ANY = 1
    DENY = 2
    ALLOW = 3


class ACLResourceType(_WireEnum):
    UNRECOGNIZED = -1
    UNKNOWN = 0
    ANY = 1
    TOPIC = 2
    GROUP = 3
    CLUSTER = 4
    TRANSACTIONAL_ID = 5


class ACLPatternType(_WireEnum):
    UNRECOGNIZED = -1
    ANY = 1
    MATCH = 2
    LITERAL = 3
    PREFIXED = 4


# --------------------------------------------------------------------------- #
# Caller-facing string-typed payloads                                          #
# --------------------------------------------------------------------------- #
class ACL(BaseModel):
    """Who may do what, from where."""

    principal: str = Field(..., examples=["User:alice"])
    host: str = Field("*", examples=["*"])
    operation: str = Field(..., examples=["Read"])
    permission_type: str = Field(..., examples=["Allow"])


class Resource(BaseModel):
    """What an ACL applies to."""

    type: str = Field(..., examples=["Topic"])
    name: str = Field(..., examples=["checkout-orders"])
    pattern_type_filter: str = Field("literal", examples=["literal"])


class StringlyTypedACL(BaseModel):
    """An ACL bound to its resource, every enumeration still a string."""

    acl: ACL
    resource: Resource

    def __str__(self) -> str:
        return "|".join(
            [
                self.acl.principal,
                self.acl.host,
                self.acl.operation,
                self.acl.permission_type,
                self.resource.type,
                self.resource.name,
                self.resource.pattern_type_filter,
            ]
        )


# --------------------------------------------------------------------------- #
# Validated protocol records                                                   #
# --------------------------------------------------------------------------- #
class ACLCreation(BaseModel):
    """One CreateAcls entry."""

    model_config = ConfigDict(frozen=True)

    resource_type: ACLResourceType
    resource_name: str
    pattern_type: ACLPatternType
    principal: str
    host: str
    operation: ACLOperation
    permission_type: ACLPermissionType


class ACLFilter(BaseModel):
    """One DescribeAcls/DeleteAcls filter; ``None`` strings match anything."""

    model_config = ConfigDict(frozen=True)

    resource_type: ACLResourceType
    resource_name: Optional[str] = None
    pattern_type: ACLPatternType = ACLPatternType.ANY
    principal: Optional[str] = None
    host: Optional[str] = None
    operation: ACLOperation = ACLOperation.ANY
    permission_type: ACLPermissionType = ACLPermissionType.ANY


class ResourceACLs(BaseModel):
    """ACLs the broker reported for one resource, in canonical string form."""

    resource: Resource
    acls: List[ACL] = Field(default_factory=list)

    def to_stringly(self) -> List[StringlyTypedACL]:
        """Flatten into one StringlyTypedACL per ACL entry."""
        return [StringlyTypedACL(acl=a, resource=self.resource) for a in self.acls]
