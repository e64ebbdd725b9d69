"""
core/plugin.py - 모니터 플러그인 베이스

스케줄러(cron 등)가 주기적으로 호출하는 플러그인의 공통 골격입니다.

플러그인 규약:
    - 생성 시 options를 검증하고, 누락된 항목은 error()로 기록
    - run(): 검증 에러가 없을 때만 build_report() 실행
    - 반환값: {"reports": [...], "errors": [{"subject": ..., "body": ...}]}

Example:
    class MyPlugin(MonitorPlugin):
        def validate(self):
            if not self.option("name"):
                self.error("Please provide name")

        def build_report(self):
            self.report({"total": 1})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)


class MonitorPlugin:
    """모니터 플러그인 베이스 클래스

    Attributes:
        options: 플러그인 옵션 (스케줄러가 전달)
        errors: 검증/실행 중 기록된 에러 항목
        reports: build_report()가 기록한 리포트
    """

    name = "monitor"

    def __init__(self, options: Mapping[str, Any] | None = None):
        self.options: dict[str, Any] = dict(options or {})
        self.errors: list[dict[str, str]] = []
        self.reports: list[dict[str, Any]] = []
        self.validate()

    def option(self, key: str, default: Any = None) -> Any:
        """옵션 값 조회 (빈 문자열은 누락으로 취급)"""
        value = self.options.get(key)
        if value is None or value == "":
            return default
        return value

    def error(self, subject: str, body: str | None = None) -> None:
        self.errors.append({"subject": subject, "body": body if body is not None else subject})

    def report(self, data: Mapping[str, Any]) -> None:
        self.reports.append(dict(data))

    def validate(self) -> None:
        """옵션 검증 (서브클래스에서 구현)"""

    def build_report(self) -> None:
        raise NotImplementedError

    def run(self) -> dict[str, list[dict[str, Any]]]:
        """플러그인 실행

        검증 에러가 있으면 외부 API를 건드리지 않고 에러만 반환합니다.
        build_report()에서 발생한 예외는 그대로 전파됩니다.
        """
        self.reports = []
        if self.errors:
            logger.warning("%s: 설정 오류로 실행 중단 (%d건)", self.name, len(self.errors))
            return {"reports": [], "errors": list(self.errors)}

        self.build_report()
        return {"reports": list(self.reports), "errors": list(self.errors)}
