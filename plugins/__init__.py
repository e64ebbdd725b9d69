"""
plugins - 모니터 플러그인

    - elb: Classic Load Balancer 헬스
    - swf: Simple Workflow 대기/좀비 태스크
"""
