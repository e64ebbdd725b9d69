"""
plugins/swf/common.py - SWF open execution 수집

boto3 클라이언트:
    - swf: list_open_workflow_executions, get_workflow_execution_history

실행(execution)의 히스토리는 첫 이벤트와 최신 이벤트만 필요하므로
maximumPageSize=1 로 양방향 조회합니다. 최신 이벤트는 호출할 때마다 다시 읽어
그 사이에 실행이 진행됐는지 확인할 수 있게 합니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol

from botocore.exceptions import ClientError

from core.exceptions import APICallError

logger = logging.getLogger(__name__)

# open 상태 실행은 시작 시각과 무관하게 전부 조회
OLDEST_START_DATE = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class HistoryEvent:
    """SWF 히스토리 이벤트

    Attributes:
        event_id: 실행 내 이벤트 ID (단조 증가)
        event_type: 이벤트 타입 (ActivityTaskScheduled 등)
        attributes: <eventType>EventAttributes 내용
    """

    event_id: int
    event_type: str
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def identity(self) -> str | None:
        return self.attributes.get("identity")

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> HistoryEvent:
        """get_workflow_execution_history 이벤트에서 생성"""
        event_type = data["eventType"]
        attributes_key = event_type[0].lower() + event_type[1:] + "EventAttributes"
        return cls(
            event_id=data["eventId"],
            event_type=event_type,
            attributes=dict(data.get(attributes_key, {})),
        )


class ExecutionHistory(Protocol):
    """실행 히스토리 접근자"""

    def first_event(self) -> HistoryEvent: ...

    def latest_event(self) -> HistoryEvent: ...


@dataclass
class WorkflowExecution:
    """open 상태의 워크플로 실행"""

    domain: str
    workflow_id: str
    run_id: str
    history: ExecutionHistory

    def first_event(self) -> HistoryEvent:
        return self.history.first_event()

    def latest_event(self) -> HistoryEvent:
        return self.history.latest_event()

    def describe(self) -> str:
        """로그용 실행 식별자"""
        return f'{self.domain}["{self.workflow_id}", "{self.run_id}"]'


class ApiExecutionHistory:
    """SWF API 기반 히스토리

    첫 이벤트(WorkflowExecutionStarted)는 바뀌지 않으므로 캐시하고,
    최신 이벤트는 매번 조회합니다.
    """

    def __init__(self, client, domain: str, workflow_id: str, run_id: str):
        self.client = client
        self.domain = domain
        self.workflow_id = workflow_id
        self.run_id = run_id
        self._first: HistoryEvent | None = None

    def _read_one(self, reverse_order: bool) -> HistoryEvent:
        try:
            response = self.client.get_workflow_execution_history(
                domain=self.domain,
                execution={"workflowId": self.workflow_id, "runId": self.run_id},
                maximumPageSize=1,
                reverseOrder=reverse_order,
            )
        except ClientError as e:
            raise APICallError.from_client_error("swf", "get_workflow_execution_history", e) from e

        events = response.get("events", [])
        if not events:
            raise APICallError(
                service="swf",
                operation="get_workflow_execution_history",
                error_message=f"빈 히스토리: {self.workflow_id}/{self.run_id}",
            )
        return HistoryEvent.from_api(events[0])

    def first_event(self) -> HistoryEvent:
        if self._first is None:
            self._first = self._read_one(reverse_order=False)
        return self._first

    def latest_event(self) -> HistoryEvent:
        return self._read_one(reverse_order=True)


# =============================================================================
# 수집 함수
# =============================================================================


def collect_open_executions(client, domain: str) -> list[WorkflowExecution]:
    """도메인의 open 상태 실행 목록

    Args:
        client: boto3 swf client
        domain: SWF 도메인 이름

    Raises:
        APICallError: SWF API 호출 실패
    """
    executions = []

    try:
        paginator = client.get_paginator("list_open_workflow_executions")
        for page in paginator.paginate(domain=domain, startTimeFilter={"oldestDate": OLDEST_START_DATE}):
            for info in page.get("executionInfos", []):
                workflow_id = info["execution"]["workflowId"]
                run_id = info["execution"]["runId"]
                executions.append(
                    WorkflowExecution(
                        domain=domain,
                        workflow_id=workflow_id,
                        run_id=run_id,
                        history=ApiExecutionHistory(client, domain, workflow_id, run_id),
                    )
                )
    except ClientError as e:
        raise APICallError.from_client_error("swf", "list_open_workflow_executions", e) from e

    logger.debug("[%s] open 실행 %d건", domain, len(executions))
    return executions
