"""ACL create/list/delete against any reachable broker."""
from __future__ import annotations

import logging
from typing import List

from kafka import errors as Errors

from kafka_admin.core.exceptions import ResponseError, raise_for_errors
from kafka_admin.domain.models.acl import (
    ACL,
    ACLFilter,
    ACLOperation,
    ACLPatternType,
    ACLPermissionType,
    ACLResourceType,
    Resource,
    ResourceACLs,
    StringlyTypedACL,
)
from kafka_admin.domain.services import acl_translator as translator
from kafka_admin.infra.kafka.admin import ClusterClient
from kafka_admin.infra.kafka.broker import DescribedResource
from kafka_admin.infra.kafka.locator import BrokerLocator

# Issue order of ListACLs; results are concatenated in this order.
LISTED_RESOURCE_TYPES = (
    ACLResourceType.TOPIC,
    ACLResourceType.GROUP,
    ACLResourceType.CLUSTER,
    ACLResourceType.TRANSACTIONAL_ID,
)


class ACLService:
    """Stateless wrapper combining broker calls and ACL translation."""

    def __init__(
        self,
        cluster: ClusterClient,
        locator: BrokerLocator,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._cluster = cluster
        self._locator = locator
        self._log = logger or logging.getLogger(__name__)

    # ------------------------------------------------------------------ #
    # Commands                                                            #
    # ------------------------------------------------------------------ #
    def create_acl(self, acl: StringlyTypedACL) -> None:
        creation = translator.build_creation(acl)
        broker = self._locator.available_broker()
        try:
            raise_for_errors(broker.create_acls([creation]))
        finally:
            broker.close()
        self._log.info("Created ACL %s", acl)

    def delete_acl(self, acl: StringlyTypedACL) -> None:
        acl_filter = translator.build_filter(acl)
        broker = self._locator.available_broker()
        try:
            self._log.info("Deleting ACL %s", acl)
            raise_for_errors(broker.delete_acls([acl_filter]))
        finally:
            broker.close()

    # ------------------------------------------------------------------ #
    # Queries                                                             #
    # ------------------------------------------------------------------ #
    def list_acls(self) -> List[ResourceACLs]:
        """Return every ACL in the cluster, grouped by resource.

        One DescribeAcls request per resource type, issued sequentially; the
        first failure aborts the whole listing.
        """
        broker = self._locator.available_broker()
        try:
            self._cluster.refresh_metadata()
            out: List[ResourceACLs] = []
            for rtype in LISTED_RESOURCE_TYPES:
                result = broker.describe_acls(
                    ACLFilter(
                        resource_type=rtype,
                        pattern_type=ACLPatternType.ANY,
                        permission_type=ACLPermissionType.ANY,
                        operation=ACLOperation.ANY,
                    )
                )
                if result.code != Errors.NoError.errno:
                    raise ResponseError(
                        translator.resource_type_name(rtype), result.code, result.message
                    )
                out.extend(_to_resource_acls(r) for r in result.resources)
            return out
        finally:
            broker.close()


def _to_resource_acls(described: DescribedResource) -> ResourceACLs:
    return ResourceACLs(
        resource=Resource(
            type=translator.resource_type_name(ACLResourceType(described.resource_type)),
            name=described.resource_name,
            pattern_type_filter=translator.pattern_type_name(
                ACLPatternType(described.pattern_type)
            ),
        ),
        acls=[
            ACL(
                principal=principal,
                host=host,
                operation=translator.operation_name(ACLOperation(operation)),
                permission_type=translator.permission_type_name(ACLPermissionType(permission)),
            )
            for principal, host, operation, permission in described.acls
        ],
    )
