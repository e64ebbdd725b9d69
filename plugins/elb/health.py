"""
plugins/elb/health.py - CLB 가용 영역별 헬스 집계

등록된 인스턴스의 헬스 상태를 가용 영역별로 집계하고,
비정상 인스턴스를 실행마다 이상 징후 로그에 한 줄씩 남깁니다.

리포트 항목:
    - total: 정상(InService) 인스턴스 수
    - <zone>: 가용 영역별 정상 인스턴스 수 (정상 인스턴스가 있는 영역만)
    - average: 영역당 평균 정상 인스턴스 수 (total / zones)
    - minimum: 정상 인스턴스가 있는 영역 중 최소값 (없으면 0)
    - zones: 입력에 등장한 전체 영역 수
    - healthy_zones / unhealthy_zones: 정상 인스턴스 유무별 영역 수

플러그인 옵션:
    - elb_name: Classic Load Balancer 이름
    - aws_credentials_path: AWS 자격 증명 YAML 경로
    - error_log_path: 이상 징후 로그 경로
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from core.anomaly_log import AnomalyLog, Clock
from core.aws import create_session
from core.config import AwsCredentials
from core.plugin import MonitorPlugin

from .common import InstanceHealthRecord, collect_instance_health

logger = logging.getLogger(__name__)

# 필요한 AWS 권한 목록
REQUIRED_PERMISSIONS = {
    "read": [
        "elasticloadbalancing:DescribeInstanceHealth",
        "ec2:DescribeInstances",
    ],
}

HealthSource = Callable[[AwsCredentials, str], list[InstanceHealthRecord]]


@dataclass(frozen=True)
class HealthReport:
    """CLB 헬스 집계 결과"""

    total: int
    per_zone: Mapping[str, int] = field(default_factory=dict)
    average: float = 0
    minimum: int = 0
    zones: int = 0
    healthy_zones: int = 0
    unhealthy_zones: int = 0

    def __post_init__(self):
        # 반환 후 영역별 카운트도 변경 불가
        object.__setattr__(self, "per_zone", MappingProxyType(dict(self.per_zone)))

    def to_report(self) -> dict[str, Any]:
        """메트릭 수집용 평면 매핑 (영역별 카운트를 최상위 키로 병합)"""
        report: dict[str, Any] = dict(self.per_zone)
        report.update(
            {
                "total": self.total,
                "average": self.average,
                "minimum": self.minimum,
                "zones": self.zones,
                "healthy_zones": self.healthy_zones,
                "unhealthy_zones": self.unhealthy_zones,
            }
        )
        return report


def aggregate_health(records: Iterable[InstanceHealthRecord]) -> HealthReport:
    """인스턴스 헬스 레코드를 가용 영역별로 집계"""
    records = list(records)

    all_zones = {r.zone for r in records}
    per_zone = dict(Counter(r.zone for r in records if r.is_healthy))

    total = sum(per_zone.values())
    zones = len(all_zones)
    healthy_zones = len(per_zone)

    return HealthReport(
        total=total,
        per_zone=per_zone,
        average=total / zones if zones else 0,
        # 정상 인스턴스가 0인 영역은 최소값 계산에서 제외
        minimum=min(per_zone.values()) if per_zone else 0,
        zones=zones,
        healthy_zones=healthy_zones,
        unhealthy_zones=zones - healthy_zones,
    )


def log_unhealthy(log: AnomalyLog, elb_name: str, records: Iterable[InstanceHealthRecord]) -> list[str]:
    """비정상 인스턴스를 입력 순서대로 한 줄씩 기록 (실행 간 중복 제거 없음)"""
    messages = [
        f"[{elb_name}] [{r.zone}] [{r.instance_id}] [{r.description or ''}]"
        for r in records
        if not r.is_healthy
    ]
    return log.write_lines(messages)


def fetch_instance_health(credentials: AwsCredentials, elb_name: str) -> list[InstanceHealthRecord]:
    """자격 증명으로 세션을 만들어 CLB 인스턴스 헬스 조회"""
    session = create_session(
        credentials.access_key_id,
        credentials.secret_access_key,
        credentials.region,
    )
    return collect_instance_health(session, elb_name, credentials.region)


class ElbHealthPlugin(MonitorPlugin):
    """CLB 가용 영역별 헬스 리포트 플러그인

    Args:
        options: elb_name, aws_credentials_path, error_log_path
        health_source: (credentials, elb_name) -> 레코드 목록 (기본: AWS 조회)
        clock: 이상 징후 로그 타임스탬프용 시간 소스
    """

    name = "elb_health"

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        health_source: HealthSource | None = None,
        clock: Clock | None = None,
    ):
        self.health_source = health_source or fetch_instance_health
        self.clock = clock
        super().__init__(options)

    def validate(self) -> None:
        # 첫 번째 누락 항목 하나만 보고
        if not self.option("elb_name"):
            self.error("Please provide name of the ELB")
        elif not self.option("aws_credentials_path"):
            self.error("Please provide a path to AWS configuration")
        elif not self.option("error_log_path"):
            self.error("Please provide a path error log")

    @property
    def elb_name(self) -> str:
        return self.option("elb_name")

    def build_report(self) -> None:
        credentials = AwsCredentials.from_file(self.option("aws_credentials_path"))
        records = list(self.health_source(credentials, self.elb_name))

        health = aggregate_health(records)
        logger.info(
            "[%s] 정상 인스턴스 %d개 / 영역 %d개 (비정상 영역 %d개)",
            self.elb_name,
            health.total,
            health.zones,
            health.unhealthy_zones,
        )

        log_unhealthy(AnomalyLog(self.option("error_log_path"), clock=self.clock), self.elb_name, records)
        self.report(health.to_report())


def run(options: Mapping[str, Any]) -> dict[str, list[dict[str, Any]]]:
    """CLB 헬스 리포트 실행"""
    return ElbHealthPlugin(options).run()
