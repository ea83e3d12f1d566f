"""ACL endpoints: list, create, delete."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from kafka_admin.api.dependencies import get_kafka_service
from kafka_admin.domain.models.acl import ResourceACLs, StringlyTypedACL
from kafka_admin.services.kafka_service import KafkaService

router = APIRouter()


@router.get("", response_model=List[ResourceACLs])
def list_acls(svc: KafkaService = Depends(get_kafka_service)) -> List[ResourceACLs]:
    """Every ACL on topics, groups, the cluster and transactional ids."""
    return svc.list_acls()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_acl(
    acl: StringlyTypedACL,
    svc: KafkaService = Depends(get_kafka_service),
) -> None:
    svc.create_acl(acl)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_acl(
    acl: StringlyTypedACL,
    svc: KafkaService = Depends(get_kafka_service),
) -> None:
    """Delete the ACLs matching *acl* exactly."""
    svc.delete_acl(acl)
