# core/__init__.py
"""
core - AWS 헬스 모니터 인프라

플러그인이 공유하는 설정, 예외, AWS 클라이언트, 로그, 호스트 정보를 포함합니다.

아키텍처:
    core/
    ├── aws/            # boto3 session/client 생성
    ├── anomaly_log.py  # append-only 이상 징후 로그
    ├── config.py       # YAML 설정 로드
    ├── exceptions.py   # 통합 예외 계층
    ├── host.py         # 로컬 호스트 이름, 프로세스 생존 확인
    └── plugin.py       # 모니터 플러그인 베이스

Usage:
    from core.config import AwsCredentials
    credentials = AwsCredentials.from_file("~/elb.yml")

    from core.anomaly_log import AnomalyLog
    AnomalyLog("~/elb.log").write("[my_elb] [eu-west-1a] [i-123] [...]")
"""

from core import anomaly_log, aws, config, exceptions, host, plugin

__all__: list[str] = [
    # 서브패키지
    "aws",
    # 모듈
    "anomaly_log",
    "config",
    "exceptions",
    "host",
    "plugin",
]
