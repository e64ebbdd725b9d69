"""
cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.
cron 등 외부 스케줄러가 주기적으로 호출하는 것을 전제로 합니다.

명령어 구조:
    awsmon --version        # 버전 표시
    awsmon tools            # 모니터 도구 목록
    awsmon elb-health ...   # CLB 가용 영역별 헬스 리포트
    awsmon swf-tasks ...    # SWF 대기/좀비 태스크 리포트

종료 코드:
    0: 리포트 생성
    1: 플러그인 설정 오류 (에러 항목 출력)
    2: 실행 중 예외 (AWS API 실패, identity 형식 오류 등)
    3: AWS 권한 부족 (필요한 IAM 권한 출력)

Usage:
    $ awsmon elb-health --elb-name my_elb --aws-credentials-path ~/elb.yml --error-log-path ~/elb.log
    $ awsmon swf-tasks --json
"""

import importlib
import json
import logging
import sys
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from core.config import get_version
from core.exceptions import MonitorError, format_error_for_user, is_access_denied

# INFO 로그가 리포트 출력에 섞이지 않도록 WARNING 레벨
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# botocore 노이즈 로그 제한
logging.getLogger("botocore.credentials").setLevel(logging.WARNING)
logging.getLogger("botocore.loaders").setLevel(logging.WARNING)

console = Console()

VERSION = get_version()


def _print_result(title: str, result: dict[str, list[dict[str, Any]]], as_json: bool) -> None:
    """플러그인 실행 결과 출력 후 에러가 있으면 종료 코드 1"""
    if as_json:
        click.echo(json.dumps(result, ensure_ascii=False, indent=2, default=str))
    else:
        for error in result["errors"]:
            console.print(f"[red bold]{error['subject']}[/red bold]")
            if error["body"] != error["subject"]:
                console.print(f"  {error['body']}")

        for report in result["reports"]:
            table = Table(title=title)
            table.add_column("metric", style="cyan")
            table.add_column("value", justify="right")
            for key, value in report.items():
                table.add_row(str(key), f"{value:g}" if isinstance(value, float) else str(value))
            console.print(table)

    if result["errors"]:
        sys.exit(1)


def _required_permissions(category: str, module: str) -> dict[str, list[str]]:
    """plugins.<category>.<module>.REQUIRED_PERMISSIONS 조회"""
    tool_module = importlib.import_module(f"plugins.{category}.{module}")
    return getattr(tool_module, "REQUIRED_PERMISSIONS", {})


def _run_plugin(plugin, category: str, module: str, as_json: bool) -> dict[str, list[dict[str, Any]]]:
    """플러그인 실행, 예외 시 종료 코드 2 (권한 부족이면 3)"""
    try:
        return plugin.run()
    except MonitorError as e:
        logging.getLogger(__name__).error("%s 실행 실패: %s", plugin.name, e, exc_info=True)
        denied = is_access_denied(e)
        permissions = _required_permissions(category, module) if denied else {}

        if as_json:
            fatal = e.to_dict()
            if denied:
                fatal["required_permissions"] = permissions
            click.echo(json.dumps({"reports": [], "errors": [], "fatal": fatal}, ensure_ascii=False, indent=2, default=str))
        else:
            console.print(f"[red]{format_error_for_user(e)}[/red]")
            for kind, actions in permissions.items():
                console.print(f"  필요 권한 ({kind}): {', '.join(actions)}")

        sys.exit(3 if denied else 2)


@click.group()
@click.version_option(VERSION, prog_name="awsmon")
@click.option("-v", "--verbose", is_flag=True, help="INFO 로그 출력")
def cli(verbose: bool) -> None:
    """AWS 헬스 모니터 - CLB 헬스 / SWF 좀비 태스크 리포트"""
    if verbose:
        logging.getLogger().setLevel(logging.INFO)


@cli.command("tools")
@click.option("--json", "as_json", is_flag=True, help="JSON 형식으로 출력")
def tools_command(as_json: bool) -> None:
    """모니터 도구 목록"""
    from plugins import elb, swf

    categories = [(elb.CATEGORY, elb.TOOLS), (swf.CATEGORY, swf.TOOLS)]

    if as_json:
        data = [
            {
                "category": c["name"],
                "tools": [
                    {**tool, "required_permissions": _required_permissions(c["name"], tool["module"])} for tool in tools
                ],
            }
            for c, tools in categories
        ]
        click.echo(json.dumps(data, ensure_ascii=False, indent=2))
        return

    table = Table(title="Monitors")
    table.add_column("category", style="cyan")
    table.add_column("command")
    table.add_column("description")
    table.add_column("permissions")
    for category, tools in categories:
        for tool in tools:
            permissions = _required_permissions(category["name"], tool["module"])
            table.add_row(
                category["display_name"],
                tool["command"],
                tool["description"],
                "\n".join(action for actions in permissions.values() for action in actions),
            )
    console.print(table)


@cli.command("elb-health")
@click.option("--elb-name", "elb_name", default=None, help="Classic Load Balancer 이름")
@click.option("--aws-credentials-path", "aws_credentials_path", default=None, help="AWS 자격 증명 YAML 경로")
@click.option("--error-log-path", "error_log_path", default=None, help="비정상 인스턴스 로그 경로")
@click.option("--json", "as_json", is_flag=True, help="JSON 형식으로 출력")
def elb_health_command(
    elb_name: str | None,
    aws_credentials_path: str | None,
    error_log_path: str | None,
    as_json: bool,
) -> None:
    """CLB 가용 영역별 헬스 리포트"""
    from plugins.elb.health import ElbHealthPlugin

    plugin = ElbHealthPlugin(
        {
            "elb_name": elb_name,
            "aws_credentials_path": aws_credentials_path,
            "error_log_path": error_log_path,
        }
    )
    _print_result(f"ELB {elb_name}", _run_plugin(plugin, "elb", "health", as_json), as_json)


@cli.command("swf-tasks")
@click.option("--config-path", "config_path", default="~/swf_tasks.yml", show_default=True, help="SWF 설정 YAML")
@click.option("--log-path", "log_path", default="~/swf_tasks.log", show_default=True, help="좀비 로그 경로")
@click.option("--json", "as_json", is_flag=True, help="JSON 형식으로 출력")
def swf_tasks_command(config_path: str, log_path: str, as_json: bool) -> None:
    """SWF 대기/좀비 태스크 리포트"""
    from plugins.swf.tasks import SwfTasksPlugin

    plugin = SwfTasksPlugin({"config_path": config_path, "log_path": log_path})
    _print_result("SWF tasks", _run_plugin(plugin, "swf", "tasks", as_json), as_json)


if __name__ == "__main__":
    cli()
