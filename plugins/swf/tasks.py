"""
plugins/swf/tasks.py - SWF 대기/좀비 태스크 카운터

open 상태 실행마다 최신 이벤트 하나만 보고 분류합니다.

분류 기준:
    - ActivityTaskScheduled: 대기(waiting) - 스케줄됐지만 아직 아무도 가져가지 않음
    - ActivityTaskStarted, DecisionTaskStarted: 좀비(zombie) 후보
      가져간 worker 프로세스가 이 호스트에서 이미 죽었다면 좀비
    - 그 외: 무시

리포트 키는 "{app}_{waiting|zombie}_tasks" 형식이며,
알려진 애플리케이션은 활동이 없어도 0으로 보고됩니다.

플러그인 옵션:
    - config_path: SWF 설정 YAML (기본: ~/swf_tasks.yml)
    - log_path: 좀비 로그 경로 (기본: ~/swf_tasks.log)
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from core.anomaly_log import AnomalyLog, Clock
from core.aws import create_session, get_client
from core.config import SwfConfig
from core.exceptions import IdentityError
from core.host import is_process_alive, local_hostname
from core.plugin import MonitorPlugin

from .common import HistoryEvent, WorkflowExecution, collect_open_executions

logger = logging.getLogger(__name__)

# 필요한 AWS 권한 목록
REQUIRED_PERMISSIONS = {
    "read": [
        "swf:ListOpenWorkflowExecutions",
        "swf:GetWorkflowExecutionHistory",
    ],
}

DEFAULT_CONFIG_PATH = "~/swf_tasks.yml"
DEFAULT_LOG_PATH = "~/swf_tasks.log"

WAITING = "waiting"
ZOMBIE = "zombie"
TASK_KINDS = (WAITING, ZOMBIE)

WAITING_EVENT_TYPES = frozenset({"ActivityTaskScheduled"})
CLAIMED_EVENT_TYPES = frozenset({"ActivityTaskStarted", "DecisionTaskStarted"})

UNKNOWN_APP = "unknown"

# unit 패턴 -> 애플리케이션 이름 (위에서부터 첫 매치)
APP_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"scrivitocom"), "dashboard"),
    (re.compile(r"crm"), "crm"),
    (re.compile(r"console"), "console"),
    (re.compile(r"scriv.*cms"), "backend"),
    (re.compile(r"cms"), "cms"),
]

KNOWN_APPS = list(dict.fromkeys(app for _, app in APP_RULES))

_PID_PATTERN = re.compile(r"0|[1-9][0-9]*")


# =============================================================================
# Identity
# =============================================================================


@dataclass(frozen=True)
class Identity:
    """태스크를 가져간 worker의 identity ("hostname:pid[:stack_id]")"""

    hostname: str
    pid: int
    stack_id: str | None = None

    @classmethod
    def parse(cls, identity: str | None) -> Identity:
        """identity 문자열 파싱

        Raises:
            IdentityError: identity가 없거나, ':'로 나눌 수 없거나, pid가 정수 문자열이 아닌 경우
        """
        if not identity:
            raise IdentityError(identity, "missing identity")

        parts = identity.split(":")
        if len(parts) < 2:
            raise IdentityError(identity, "cannot split by ':'")

        hostname, pid = parts[0], parts[1]
        if not _PID_PATTERN.fullmatch(pid):
            raise IdentityError(identity, f"unexpected pid {pid!r}")

        stack_id = parts[2] if len(parts) > 2 and parts[2] else None
        return cls(hostname=hostname, pid=int(pid), stack_id=stack_id)


# =============================================================================
# 애플리케이션 이름 / 통계
# =============================================================================


def app_name_from_unit(unit: Any) -> str:
    if unit is None:
        return UNKNOWN_APP
    for pattern, app in APP_RULES:
        if pattern.search(str(unit)):
            return app
    return UNKNOWN_APP


def resolve_app_name(execution: WorkflowExecution) -> str:
    """첫 이벤트 input의 unit 필드로 애플리케이션 이름 결정"""
    raw_input = execution.first_event().attributes.get("input")
    if raw_input is None:
        return UNKNOWN_APP

    data = json.loads(raw_input)
    unit = data.get("unit") if isinstance(data, dict) else None
    return app_name_from_unit(unit)


def metric_key(kind: str, app: str) -> str:
    return f"{app}_{kind}_tasks"


class TaskStatistics:
    """애플리케이션별 대기/좀비 태스크 카운트

    알려진 애플리케이션 x 태스크 종류 조합을 모두 0으로 초기화합니다.
    """

    def __init__(self, apps: Iterable[str] = KNOWN_APPS):
        apps = list(apps)
        self.counts: dict[str, int] = {}
        for kind in TASK_KINDS:
            for app in apps:
                self.counts[metric_key(kind, app)] = 0

    def increment(self, kind: str, app: str) -> None:
        key = metric_key(kind, app)
        self.counts[key] = self.counts.get(key, 0) + 1

    def __getitem__(self, key: str) -> int:
        return self.counts[key]

    def as_dict(self) -> dict[str, int]:
        return dict(self.counts)


# =============================================================================
# 좀비 판정
# =============================================================================


class ZombieDetector:
    """가져간 worker가 죽은 태스크 판정

    Args:
        log: 좀비 로그
        hostname: 로컬 호스트 이름
        stack_id: 현재 배포 스택 (None이면 스택 필터링 안 함)
        is_alive: pid 생존 여부 확인 함수
    """

    def __init__(
        self,
        log: AnomalyLog,
        hostname: str,
        stack_id: str | None = None,
        is_alive: Callable[[int], bool] = is_process_alive,
    ):
        self.log = log
        self.hostname = hostname
        self.stack_id = stack_id
        self.is_alive = is_alive

    def is_foreign_stack(self, stack_id: str | None) -> bool:
        # 설정과 이벤트 양쪽에 stack_id가 있을 때만 비교
        return bool(stack_id and self.stack_id and stack_id != self.stack_id)

    def is_zombie(self, execution: WorkflowExecution, event: HistoryEvent) -> bool:
        """이벤트를 가져간 worker가 죽었는지 판정

        Raises:
            IdentityError: identity 형식 오류
        """
        identity = Identity.parse(event.identity)

        if identity.hostname != self.hostname:
            return False

        if self.is_foreign_stack(identity.stack_id):
            # TODO: 다른 스택의 좀비를 별도 메트릭으로 보고할지 결정 필요
            logger.debug(
                "%s: 다른 스택 %s (현재 %s), 판정 생략",
                execution.describe(),
                identity.stack_id,
                self.stack_id,
            )
            return False

        if self.is_alive(identity.pid):
            return False

        # 읽은 뒤 실행이 진행됐으면 좀비 아님
        if execution.latest_event().event_id != event.event_id:
            return False

        self.log_zombie(execution)
        return True

    def log_zombie(self, execution: WorkflowExecution) -> str:
        details = json.dumps(execution.first_event().attributes, default=str, ensure_ascii=False)
        line = self.log.write(f"Zombie (execution: {execution.describe()} details: {details})")
        logger.warning("좀비 태스크 발견: %s", execution.describe())
        return line


def count_tasks(executions: Iterable[WorkflowExecution], detector: ZombieDetector) -> TaskStatistics:
    """open 실행들의 대기/좀비 태스크 집계"""
    statistics = TaskStatistics()

    for execution in executions:
        last_event = execution.latest_event()

        if last_event.event_type in WAITING_EVENT_TYPES:
            statistics.increment(WAITING, resolve_app_name(execution))
        elif last_event.event_type in CLAIMED_EVENT_TYPES:
            if detector.is_zombie(execution, last_event):
                statistics.increment(ZOMBIE, resolve_app_name(execution))

    return statistics


# =============================================================================
# 플러그인
# =============================================================================

ExecutionSource = Callable[[SwfConfig], list[WorkflowExecution]]


def fetch_open_executions(config: SwfConfig) -> list[WorkflowExecution]:
    """설정의 자격 증명으로 SWF open 실행 조회"""
    session = create_session(config.access_key_id, config.secret_access_key, config.region)
    client = get_client(session, "swf", region_name=config.region, endpoint_url=config.endpoint_url)
    return collect_open_executions(client, config.domain)


class SwfTasksPlugin(MonitorPlugin):
    """SWF 대기/좀비 태스크 리포트 플러그인

    Args:
        options: config_path, log_path
        execution_source: SwfConfig -> open 실행 목록 (기본: AWS 조회)
        hostname: 로컬 호스트 이름 (기본: socket)
        is_alive: pid 생존 확인 (기본: psutil)
        clock: 좀비 로그 타임스탬프용 시간 소스
    """

    name = "swf_tasks"

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        execution_source: ExecutionSource | None = None,
        hostname: str | None = None,
        is_alive: Callable[[int], bool] = is_process_alive,
        clock: Clock | None = None,
    ):
        self.execution_source = execution_source or fetch_open_executions
        self.hostname = hostname
        self.is_alive = is_alive
        self.clock = clock
        super().__init__(options)

    def validate(self) -> None:
        if "config_path" in self.options and not self.option("config_path"):
            self.error("Please provide a path to SWF configuration")
        elif "log_path" in self.options and not self.option("log_path"):
            self.error("Please provide a path zombie log")

    def build_report(self) -> None:
        config = SwfConfig.from_file(self.option("config_path", DEFAULT_CONFIG_PATH))

        detector = ZombieDetector(
            log=AnomalyLog(self.option("log_path", DEFAULT_LOG_PATH), clock=self.clock),
            hostname=self.hostname or local_hostname(),
            stack_id=config.stack_id,
            is_alive=self.is_alive,
        )

        statistics = count_tasks(self.execution_source(config), detector)
        self.report(statistics.as_dict())


def run(options: Mapping[str, Any]) -> dict[str, list[dict[str, Any]]]:
    """SWF 태스크 리포트 실행"""
    return SwfTasksPlugin(options).run()
