"""
plugins/elb - Classic Load Balancer 헬스 모니터

도구 목록:
    - CLB 헬스 리포트: 가용 영역별 정상 인스턴스 집계 + 비정상 인스턴스 로그

CLI 사용법:
    awsmon elb-health --elb-name my_elb --aws-credentials-path ~/elb.yml --error-log-path ~/elb.log
"""

CATEGORY = {
    "name": "elb",
    "display_name": "ELB",
    "description": "Classic Load Balancer 인스턴스 헬스",
    "aliases": ["clb", "loadbalancer"],
}

TOOLS = [
    {
        "name": "CLB 헬스 리포트",
        "description": "가용 영역별 정상 인스턴스 수 집계, 비정상 인스턴스 로그 기록",
        "permission": "read",
        "module": "health",
        "command": "elb-health",
    },
]
