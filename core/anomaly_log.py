"""
core/anomaly_log.py - append-only 이상 징후 로그

한 줄에 이상 징후 하나씩, UTF-8 평문으로 기록합니다.
회전(rotation)이나 크기 제한은 없으며 운영자가 관리합니다.

파일 잠금은 하지 않으므로 같은 로그 파일에 대한 동시 실행은
스케줄러 쪽에서 직렬화해야 합니다.

Usage:
    log = AnomalyLog("~/elb_health.log")
    log.write("[my_elb] [eu-west-1a] [i-123] [Instance has failed at least the UnhealthyThreshold]")
    # -> [2024-01-01 12:00:00 +0900] [my_elb] [eu-west-1a] [i-123] [...]

    # 테스트에서는 시간 소스를 주입
    log = AnomalyLog(tmp_path / "x.log", clock=lambda: frozen)
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

Clock = Callable[[], datetime]

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %z"


def local_now() -> datetime:
    """오프셋이 포함된 로컬 현재 시각"""
    return datetime.now().astimezone()


def format_timestamp(moment: datetime) -> str:
    """로그용 타임스탬프 (예: 2024-01-01 12:00:00 +0900)"""
    return moment.strftime(TIMESTAMP_FORMAT).rstrip()


class AnomalyLog:
    """append 모드로 한 줄씩 기록하는 로그 파일

    Attributes:
        path: 로그 파일 경로 (~ 확장됨)
        clock: 타임스탬프용 시간 소스
    """

    def __init__(self, path: str | Path, clock: Clock | None = None):
        self.path = Path(path).expanduser()
        self.clock = clock or local_now

    def timestamp(self) -> str:
        return format_timestamp(self.clock())

    def write(self, message: str) -> str:
        """타임스탬프를 붙여 한 줄 추가하고, 기록한 줄을 반환"""
        return self.write_lines([message])[0]

    def write_lines(self, messages: list[str]) -> list[str]:
        """같은 타임스탬프로 여러 줄 추가

        한 번의 실행에서 나온 블록은 동일한 시각으로 기록됩니다.
        """
        if not messages:
            return []

        stamp = self.timestamp()
        lines = [f"[{stamp}] {message}" for message in messages]

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")
                f.flush()

        return lines
