"""
plugins/swf - Simple Workflow 태스크 모니터

도구 목록:
    - SWF 태스크 리포트: 애플리케이션별 대기/좀비 태스크 수 + 좀비 로그

CLI 사용법:
    awsmon swf-tasks --config-path ~/swf_tasks.yml --log-path ~/swf_tasks.log
"""

CATEGORY = {
    "name": "swf",
    "display_name": "SWF",
    "description": "Simple Workflow 대기/좀비 태스크",
    "aliases": ["workflow"],
}

TOOLS = [
    {
        "name": "SWF 태스크 리포트",
        "description": "대기 중인 태스크와 worker가 죽은 좀비 태스크 집계",
        "permission": "read",
        "module": "tasks",
        "command": "swf-tasks",
    },
]
