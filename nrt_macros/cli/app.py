from __future__ import annotations

import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, EngineSettings, apply_env_overrides, load_config
from ..excel.reader import read_workbook
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import log_summary, set_debug, setup_logging
from ..macros.registry import MacroRegistry
from ..models.macro_result import AutoDetectResult
from ..services.auto_detect import auto_detect_and_execute
from ..services.summary import render_summary_line

logger = logging.getLogger(__name__)

"""CLI entrypoint.

Flow:
- Load .env (values override the process environment) and the engine config
- Read the workbook and run every applicable macro definition
- Write each produced document to the output directory (unless --dry-run)
- Print the SUMMARY line and exit with the contract exit code
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; a broken file only produces a warning."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except (OSError, ValueError) as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="nrt-macros",
        description="Generate NRT DVM ruleset XML from a workbook using macro definitions",
    )
    p.add_argument("workbook", nargs="?", help="Excel workbook (.xlsx) to process")
    p.add_argument("--release", default="", help="Release identifier, e.g. R2.1 or 202109")
    p.add_argument("--config", type=Path, default=None, help=f"Engine config (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--output-dir", type=Path, default=None, help="Directory for produced XML files")
    p.add_argument("--dry-run", action="store_true", help="Run macros without writing files")
    p.add_argument("--list-macros", action="store_true", help="Print registered macro names then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _load_settings(config_path: Path | None) -> EngineSettings:
    """Explicit --config must exist; the default path is optional."""
    if config_path is not None:
        return load_config(config_path)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return apply_env_overrides(EngineSettings())


def _write_documents(result: AutoDetectResult, output_dir: Path) -> tuple[list[Path], int]:
    """Write every successful document below *output_dir*.

    Returns the written paths and the number of documents refused because
    their file name resolves outside *output_dir*. A name produced twice is
    written twice (last one wins) with a warning.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    root = output_dir.resolve()
    written: list[Path] = []
    seen: dict[Path, str] = {}
    rejected = 0
    for r in result.successes:
        target = (output_dir / r.file_name).resolve()
        if target == root or not target.is_relative_to(root):
            logger.error(f"macro {r.macro_name}: refusing to write {r.file_name!r} outside {output_dir}")
            rejected += 1
            continue
        if target in seen:
            logger.warning(f"{r.file_name} produced by {seen[target]} is overwritten by {r.macro_name}")
        seen[target] = r.macro_name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(r.xml_content, encoding="utf-8")
        written.append(output_dir / r.file_name)
    return written, rejected


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    try:
        settings = _load_settings(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    registry = MacroRegistry.from_settings(settings)
    if not registry.directory.is_dir():
        logger.error(f"macros directory not found: {registry.directory}")
        return EXIT_FATAL

    if args.list_macros:
        for name in registry.list():
            print(name)
        return EXIT_SUCCESS_ALL

    if not args.workbook:
        logger.error("workbook: no workbook given")
        return EXIT_FATAL

    workbook = Path(args.workbook)
    if not workbook.exists():
        logger.error(f"workbook not found: {workbook}")
        return EXIT_FATAL
    try:
        dataset = read_workbook(workbook)
    except Exception as e:
        logger.error(f"workbook: {e}")
        return EXIT_FATAL

    logger.info(f"Processing workbook: {workbook.name} release={args.release or '-'}")

    total_macros = len(registry)
    error_log = ErrorLogBuffer()
    result = auto_detect_and_execute(dataset, args.release, registry, settings, error_log)

    for skipped in result.skipped_macros:
        logger.info(f"skipped: {skipped}")

    rejected = 0
    if not args.dry_run:
        output_dir = args.output_dir or Path(settings.output_directory)
        written, rejected = _write_documents(result, output_dir)
        for path in written:
            logger.info(f"wrote {path}")

    try:
        log_path = error_log.flush()
    except OSError as e:
        logger.warning(f"error log flush failed: {e}")
    else:
        if log_path is not None:
            logger.warning(f"errors recorded in {log_path}")

    summary_line = render_summary_line(total_macros, result)
    # log_summary adds the "SUMMARY " prefix itself
    log_summary(summary_line[len("SUMMARY "):])

    if result.failures or rejected:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL
