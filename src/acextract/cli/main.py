"""命令行入口。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from acextract.catalog.folder import FolderCatalog
from acextract.core.exceptions import (
    InvalidConfigurationError,
    OutputDirectoryCreationError,
    OutputPathIsNotDirectoryError,
)
from acextract.core.models import BatchResult, FileOutcome
from acextract.core.report import write_csv_report
from acextract.processing.extract import ExtractOperation
from acextract.processing.listing import ListOperation
from acextract.processing.operation import CompoundOperation, Operation
from acextract.utils.logging import setup_logging

app = typer.Typer(help="从资源目录中提取图片，可重建 .imageset 目录结构。")
console = Console(highlight=False)

FATAL_ERRORS = (InvalidConfigurationError, OutputPathIsNotDirectoryError, OutputDirectoryCreationError)


def _build_reporter(result: BatchResult):
    def reporter(outcome: FileOutcome) -> None:
        result.record(outcome)
        prefix = f"Extracting: {escape(outcome.name)}"
        if outcome.status.startswith("skipped"):
            console.print(f"{prefix} [bold yellow]SKIPPED[/bold yellow] {escape(outcome.message or '')}")
        elif outcome.ok:
            console.print(f"{prefix} [bold]OK[/bold]")
        else:
            console.print(f"{prefix} [bold red]FAILED[/bold red] {escape(outcome.message or '')}")

    return reporter


def _print_line(line: str) -> None:
    console.print(escape(line))


def _open_catalog(source: Path, recursive: bool) -> FolderCatalog:
    try:
        return FolderCatalog(source.expanduser().resolve(), recursive=recursive)
    except InvalidConfigurationError as exc:
        console.print(f"[bold red]错误[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


@app.command("extract")
def extract_cli(  # noqa: PLR0913
    source: Path = typer.Argument(..., help="资源目录（已解码的图片文件夹）"),
    output: Path = typer.Option(..., "--output", "-o", help="输出目录"),
    mode: str = typer.Option("normal", "--mode", "-m", help="输出模式：normal 或 dir（重建 .imageset）"),
    vector_policy: str = typer.Option("skip", "--vector-policy", help="矢量资源处理：skip 或 fail"),
    list_first: bool = typer.Option(False, "--list", "-l", help="提取前列出图片集"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="输出更详细的信息"),
    report: Optional[str] = typer.Option(None, "--report", help="在输出目录中写入 CSV 报告的文件名"),
    recursive: bool = typer.Option(True, "--recursive/--no-recursive", help="是否递归扫描目录"),
) -> None:
    """执行提取。"""

    setup_logging(logging.DEBUG if verbose else logging.WARNING)
    catalog = _open_catalog(source, recursive)

    result = BatchResult()
    try:
        extract = ExtractOperation(
            output, mode=mode, vector_policy=vector_policy, reporter=_build_reporter(result)
        )
    except InvalidConfigurationError as exc:
        raise typer.BadParameter(str(exc), param_hint="--vector-policy") from exc

    operations: List[Operation] = []
    if list_first:
        operations.append(ListOperation(verbose=verbose, sink=_print_line))
    operations.append(extract)

    try:
        CompoundOperation(operations).read(catalog)
    except FATAL_ERRORS as exc:
        console.print(f"[bold red]FAILED[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    if report:
        try:
            report_path = write_csv_report(result.all_outcomes(), extract.output_path, report)
        except OSError as exc:
            logging.getLogger(__name__).error("写入报告失败：%s", exc)
        else:
            typer.echo(f"报告文件：{report_path}")

    typer.echo(
        f"提取完成：成功 {len(result.succeeded)} 个，跳过 {len(result.skipped)} 个，失败 {len(result.failed)} 个。"
    )


@app.command("list")
def list_cli(
    source: Path = typer.Argument(..., help="资源目录（已解码的图片文件夹）"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="同时列出每个图片"),
    recursive: bool = typer.Option(True, "--recursive/--no-recursive", help="是否递归扫描目录"),
) -> None:
    """列出图片集。"""

    setup_logging(logging.DEBUG if verbose > 1 else logging.WARNING)
    catalog = _open_catalog(source, recursive)
    ListOperation(verbose=verbose, sink=_print_line).read(catalog)


if __name__ == "__main__":
    app()
