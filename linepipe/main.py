from __future__ import annotations

import logging
import time
from typing import Callable

import typer

from linepipe.common.arguments import resolve_argument
from linepipe.common.run_id import generate_run_id
from linepipe.common.time import getDurationMs
from linepipe.config.config import Settings, SettingsError, load_settings
from linepipe.domain.errors import PipelineError, render_error
from linepipe.domain.pipeline import LinePipeline
from linepipe.domain.reporting.collector import ReportCollector
from linepipe.domain.transform.integers import I32
from linepipe.domain.transform.transforms import LineTransform, apply_transform, get_transform, integer_transform
from linepipe.infra.artifacts.report_writer import createEmptyReport, finalizeReport, writeReportJson
from linepipe.infra.logging.setup import closeCommandLogger, createCommandLogger, logEvent

app = typer.Typer(no_args_is_help=True, add_completion=False)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

def reportError(error: PipelineError) -> int:
    """
    Назначение:
        Граница отчёта об ошибках: одна диагностическая строка в stderr.

    Выходные данные:
        int
            Код завершения процесса (всегда ненулевой).
    """
    typer.echo(render_error(error), err=True)
    return EXIT_FAILED

def runWithReport(
    ctx: typer.Context,
    commandName: str,
    runner: Callable[[logging.Logger, ReportCollector], int],
) -> None:
    """
    Назначение:
        Унифицированная обвязка выполнения команд:
        - создаёт логгер (+ файл лога, если задан log_dir)
        - создаёт отчёт и записывает его в finally, если задан report_dir
        - переводит код возврата runner в exit code процесса

    Входные данные:
        ctx: typer.Context
        commandName: str
        runner: (logger, report) -> int

    Выходные данные:
        None
    """
    runId = ctx.obj["runId"]
    settings: Settings = ctx.obj["settings"]
    sources = ctx.obj["sources"]

    startMonotonic = time.monotonic()

    logger, logFilePath = createCommandLogger(
        commandName=commandName,
        logDir=settings.log_dir,
        runId=runId,
        logLevel=settings.log_level,
    )
    report = createEmptyReport(runId=runId, command=commandName, configSources=sources)

    exitCode = EXIT_FAILED
    try:
        logEvent(logger, logging.INFO, runId, "core", f"Command started config_sources={sources}")
        exitCode = runner(logger, report)
        logEvent(logger, logging.INFO, runId, "core", f"Command finished exit_code={exitCode}")
    except Exception as exc:
        report.record_unexpected(exc)
        logEvent(logger, logging.ERROR, runId, "core", f"Command crashed: {type(exc).__name__}: {exc}")
        raise
    finally:
        if settings.report_dir:
            durationMs = getDurationMs(startMonotonic, time.monotonic())
            finalizeReport(
                report=report,
                durationMs=durationMs,
                logFile=logFilePath,
                settings=settings,
                configPath=ctx.obj["configPath"],
            )
            reportPath = writeReportJson(report, settings.report_dir, f"report_{commandName}_{runId}")
            logEvent(logger, logging.INFO, runId, "report", f"Report written: {reportPath}")
        closeCommandLogger(logger)

    if exitCode != EXIT_OK:
        raise typer.Exit(code=exitCode)

def runPipelineCommand(
    ctx: typer.Context,
    commandName: str,
    pathArg: str | None,
    transform: LineTransform | None,
) -> None:
    """
    Назначение:
        Общая реализация команд lines/numbers: аргумент -> пайплайн -> вывод значений.

    Поведение:
        - Значения печатаются только после успешного завершения всего прогона.
        - При ошибке в stdout ничего не попадает.
    """
    settings: Settings = ctx.obj["settings"]
    runId = ctx.obj["runId"]

    def execute(logger: logging.Logger, report: ReportCollector) -> int:
        try:
            path = resolve_argument([pathArg], name="filename")
        except PipelineError as exc:
            logEvent(logger, logging.ERROR, runId, "args", f"Argument resolution failed: {exc}")
            report.record_failure(exc)
            return reportError(exc)

        report.set_source(path)
        pipeline = LinePipeline(transform=transform, encoding=settings.encoding, logger=logger, run_id=runId)
        result = pipeline.run(path)
        if result.error is not None:
            report.record_failure(result.error)
            return reportError(result.error)

        for value in result.values:
            typer.echo(value)
        report.record_success(len(result.values))
        return EXIT_OK

    runWithReport(ctx=ctx, commandName=commandName, runner=execute)

@app.callback()
def main(
    ctx: typer.Context,
    config: str | None = typer.Option(None, "--config", help="Path to config.yml"),
    runId: str | None = typer.Option(None, "--run-id", help="Run identifier (UUID). If omitted, generated."),
    logLevel: str | None = typer.Option(None, "--log-level", help="Log level: ERROR|WARN|INFO|DEBUG"),
    logDir: str | None = typer.Option(None, "--log-dir", help="Directory for logs (file logging is off when unset)."),
    reportDir: str | None = typer.Option(None, "--report-dir", help="Directory for JSON run reports."),
    encoding: str | None = typer.Option(None, "--encoding", help="Text encoding of input files (default utf-8)."),
):
    """
    Назначение:
        Общая инициализация CLI:
        - генерирует/принимает run_id
        - загружает настройки (CLI > ENV > config > defaults)
        - сохраняет всё в ctx.obj для подкоманд
    """
    if not runId:
        runId = generate_run_id()

    cliOverrides = {
        "log_level": logLevel,
        "log_dir": logDir,
        "report_dir": reportDir,
        "encoding": encoding,
    }
    try:
        loaded = load_settings(config_path=config, cli_overrides=cliOverrides)
    except SettingsError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_USAGE)

    ctx.obj = {
        "runId": runId,
        "settings": loaded.settings,
        "sources": loaded.sources_used,
        "configPath": config,
    }

@app.command("parse-arg", context_settings={"ignore_unknown_options": True})
def parseArg(
    ctx: typer.Context,
    value: str | None = typer.Argument(None, help="Decimal integer literal (32-bit signed)"),
):
    """Parse a single command-line value as an integer and print it."""
    runId = ctx.obj["runId"]
    transform = integer_transform(I32, trim=False)

    def execute(logger: logging.Logger, report: ReportCollector) -> int:
        try:
            text = resolve_argument([value], name="argument")
            report.set_source(text)
            number = apply_transform(transform, text, None)
        except PipelineError as exc:
            logEvent(logger, logging.ERROR, runId, "args", f"Argument rejected kind={exc.kind.value}")
            report.record_failure(exc)
            return reportError(exc)

        typer.echo(number)
        report.record_success(1)
        return EXIT_OK

    runWithReport(ctx=ctx, commandName="parse-arg", runner=execute)

@app.command("lines")
def lines(
    ctx: typer.Context,
    path: str | None = typer.Argument(None, help="Path to a text file"),
):
    """Print every line of a text file."""
    runPipelineCommand(ctx, "lines", path, transform=None)

@app.command("numbers")
def numbers(
    ctx: typer.Context,
    path: str | None = typer.Argument(None, help="Path to a file with one integer per line"),
    numberType: str = typer.Option("u64", "--type", help="Integer type: u64|u32|i64|i32"),
):
    """Parse every line of a file as an integer and print the numbers."""
    try:
        transform = get_transform(numberType)
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_USAGE)
    runPipelineCommand(ctx, "numbers", path, transform=transform)


if __name__ == "__main__":
    app()
