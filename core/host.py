"""
core/host.py - 로컬 호스트 정보

zombie 판정에 필요한 두 가지 경계 의존성:
    - local_hostname(): 로컬 호스트 이름
    - is_process_alive(pid): 로컬 프로세스 테이블에 pid가 존재하는지
"""

import socket

import psutil


def local_hostname() -> str:
    """로컬 호스트 이름 반환 (`hostname` 명령과 동일한 값)"""
    return socket.gethostname().strip()


def is_process_alive(pid: int) -> bool:
    """pid에 해당하는 프로세스가 로컬 호스트에 존재하는지 확인"""
    return psutil.pid_exists(pid)
