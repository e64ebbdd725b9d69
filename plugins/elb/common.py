"""
plugins/elb/common.py - Classic Load Balancer 인스턴스 헬스 수집

boto3 클라이언트:
    - elb: describe_instance_health (인스턴스 상태)
    - ec2: describe_instances (인스턴스 가용 영역)

CLB의 describe_instance_health 응답에는 가용 영역이 없으므로
EC2 Placement 정보와 조인합니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from botocore.exceptions import ClientError

from core.aws import get_client
from core.exceptions import APICallError

logger = logging.getLogger(__name__)

UNKNOWN_ZONE = "unknown"

# describe_instances 필터 값 최대 개수
_EC2_ID_BATCH = 200


class InstanceState(Enum):
    """CLB 인스턴스 헬스 상태"""

    IN_SERVICE = "InService"
    OUT_OF_SERVICE = "OutOfService"
    UNKNOWN = "Unknown"

    @classmethod
    def from_string(cls, value: str | None) -> InstanceState:
        """API 문자열에서 InstanceState 변환 (알 수 없는 값은 UNKNOWN)"""
        for state in cls:
            if state.value == value:
                return state
        return cls.UNKNOWN

    @property
    def is_healthy(self) -> bool:
        return self is InstanceState.IN_SERVICE


@dataclass(frozen=True)
class InstanceHealthRecord:
    """인스턴스 헬스 레코드"""

    instance_id: str
    zone: str
    state: InstanceState
    description: str | None = None

    @property
    def is_healthy(self) -> bool:
        return self.state.is_healthy


# =============================================================================
# 수집 함수
# =============================================================================


def collect_instance_health(session, elb_name: str, region: str | None = None) -> list[InstanceHealthRecord]:
    """CLB에 등록된 인스턴스 헬스 수집

    Args:
        session: boto3 session
        elb_name: Classic Load Balancer 이름
        region: 리전 (None이면 세션 기본값)

    Returns:
        API 응답 순서 그대로의 InstanceHealthRecord 목록

    Raises:
        APICallError: ELB/EC2 API 호출 실패
    """
    elb = get_client(session, "elb", region_name=region)

    try:
        response = elb.describe_instance_health(LoadBalancerName=elb_name)
    except ClientError as e:
        raise APICallError.from_client_error("elb", "describe_instance_health", e) from e

    states = response.get("InstanceStates", [])
    if not states:
        return []

    zones = _get_instance_zones(session, [s["InstanceId"] for s in states], region)

    records = []
    for state in states:
        instance_id = state["InstanceId"]
        zone = zones.get(instance_id)
        if zone is None:
            # 종료 후 EC2에서 사라진 인스턴스
            logger.warning("[%s] %s: 가용 영역을 찾을 수 없음", elb_name, instance_id)
            zone = UNKNOWN_ZONE

        records.append(
            InstanceHealthRecord(
                instance_id=instance_id,
                zone=zone,
                state=InstanceState.from_string(state.get("State")),
                description=state.get("Description") or None,
            )
        )

    return records


def _get_instance_zones(session, instance_ids: list[str], region: str | None) -> dict[str, str]:
    """인스턴스 ID -> 가용 영역 매핑"""
    ec2 = get_client(session, "ec2", region_name=region)
    zones: dict[str, str] = {}

    for start in range(0, len(instance_ids), _EC2_ID_BATCH):
        batch = instance_ids[start : start + _EC2_ID_BATCH]
        try:
            paginator = ec2.get_paginator("describe_instances")
            # InstanceIds 파라미터는 없는 ID가 섞이면 호출 전체가 실패함
            for page in paginator.paginate(Filters=[{"Name": "instance-id", "Values": batch}]):
                for reservation in page.get("Reservations", []):
                    for instance in reservation.get("Instances", []):
                        zone = instance.get("Placement", {}).get("AvailabilityZone")
                        if zone:
                            zones[instance["InstanceId"]] = zone
        except ClientError as e:
            raise APICallError.from_client_error("ec2", "describe_instances", e) from e

    return zones
