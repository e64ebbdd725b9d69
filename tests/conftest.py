"""
tests/conftest.py - pytest 공통 픽스처

AWS 클라이언트 모킹, 고정 시계, 설정 파일, SWF 히스토리 헬퍼를 제공합니다.

Usage:
    def test_something(frozen_clock, elb_credentials_file):
        # frozen_clock: 항상 같은 시각을 반환하는 시간 소스
        # elb_credentials_file: tmp_path에 작성된 AWS 자격 증명 YAML
        pass
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock, patch

import pytest
import yaml

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


FROZEN_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone(timedelta(hours=9)))
FROZEN_STAMP = "2024-01-01 12:00:00 +0900"


# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment():
    """테스트 환경 설정"""
    os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

    yield


@pytest.fixture
def frozen_clock():
    """항상 FROZEN_TIME을 반환하는 시간 소스"""
    return lambda: FROZEN_TIME


# =============================================================================
# AWS 모킹 픽스처
# =============================================================================


@pytest.fixture
def mock_boto3_session():
    """boto3.Session 모킹"""
    with patch("boto3.Session") as mock_session_class:
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session

        mock_session.client.return_value = MagicMock()
        mock_session.region_name = "eu-west-1"

        yield mock_session


# =============================================================================
# 설정 파일 픽스처
# =============================================================================


@pytest.fixture
def elb_credentials_file(tmp_path):
    """ELB 모니터용 AWS 자격 증명 YAML"""
    path = tmp_path / "elb.yml"
    path.write_text(
        yaml.safe_dump(
            {
                "access_key_id": "xxx",
                "secret_access_key": "yyy",
                "region": "zzz",
            }
        ),
        encoding="utf-8",
    )
    return path


def write_swf_config(path: Path, stack_id: Optional[str] = None) -> Path:
    """SWF 모니터 설정 YAML 작성"""
    data: Dict[str, Any] = {
        "simple_workflow_access_key_id": "xxx",
        "simple_workflow_secret_access_key": "yyy",
        "simple_workflow_endpoint": "swf.eu-west-1.amazonaws.com",
        "simple_workflow_domain": "my-domain",
    }
    if stack_id:
        data["stack_id"] = stack_id
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


@pytest.fixture
def swf_config_file(tmp_path):
    """stack_id 없는 SWF 설정 YAML"""
    return write_swf_config(tmp_path / "swf_tasks.yml")


# =============================================================================
# SWF 히스토리 헬퍼
# =============================================================================


class ListHistory:
    """메모리 기반 실행 히스토리 (오래된 순서)

    테스트 중 append()로 이벤트를 추가하면 실행이 진행된 것처럼 동작합니다.
    """

    def __init__(self, events: List[Any]):
        self.events = list(events)

    def first_event(self):
        return self.events[0]

    def latest_event(self):
        return self.events[-1]

    def append(self, event) -> None:
        self.events.append(event)


def make_event(event_id: int, event_type: str, **attributes):
    """HistoryEvent 생성"""
    from plugins.swf.common import HistoryEvent

    return HistoryEvent(event_id=event_id, event_type=event_type, attributes=attributes)


def make_execution(
    last_type: str = "ActivityTaskStarted",
    identity: Optional[str] = "hostA:999:stackX",
    unit: Optional[str] = "scrivitocom-web",
    workflow_id: str = "wf-1",
    run_id: str = "run-1",
):
    """시작 이벤트 + 마지막 이벤트로 구성된 WorkflowExecution 생성"""
    import json

    from plugins.swf.common import WorkflowExecution

    started_attributes: Dict[str, Any] = {"workflowType": {"name": "Job", "version": "1"}}
    if unit is not None:
        started_attributes["input"] = json.dumps({"unit": unit})

    last_attributes: Dict[str, Any] = {}
    if identity is not None:
        last_attributes["identity"] = identity

    history = ListHistory(
        [
            make_event(1, "WorkflowExecutionStarted", **started_attributes),
            make_event(2, last_type, **last_attributes),
        ]
    )
    return WorkflowExecution(domain="my-domain", workflow_id=workflow_id, run_id=run_id, history=history)


# =============================================================================
# 유틸리티 함수
# =============================================================================


def create_mock_client_error(
    error_code: str,
    error_message: str = "Test error",
) -> Exception:
    """ClientError 생성 헬퍼"""
    from botocore.exceptions import ClientError

    return ClientError(
        {
            "Error": {
                "Code": error_code,
                "Message": error_message,
            }
        },
        "TestOperation",
    )
