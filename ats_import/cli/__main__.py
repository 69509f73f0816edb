from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from ats_import.config.loader import ConfigError, ImportConfig, load_config, load_jobs
from ats_import.logging.init import log_session_summary, setup_logging
from ats_import.models.batch import ImportBatch
from ats_import.models.job import Job, active_jobs
from ats_import.models.session import ImportSession, SessionStatus
from ats_import.services.handoff import HandOffError, JsonFileSink, hand_off
from ats_import.services.orchestrator import (
    CommitRejectedError,
    SessionStateError,
    commit_all_mapped,
    commit_single,
    load_file,
    map_sheet,
)
from ats_import.services.progress import ProgressTracker
from ats_import.services.template import write_template

"""CLI entrypoint: dry-run a bulk import from the command line.

Flow:
- Load .env, config and the job list
- Read the file into an ImportSession
- Map sheets / select the job, commit, and optionally write the batch as the
  JSON request bodies the bulk-create endpoint would receive
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_REJECTED = 2

CONFIG_ENV_VAR = "ATS_IMPORT_CONFIG"


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env via python-dotenv; a missing file is not an error."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="ats_import", description="Candidate bulk import (CSV / Excel)")
    p.add_argument("file", nargs="?", type=Path, help="CSV or Excel file to import")
    p.add_argument("--jobs", type=Path, help="YAML job list used for job lookups")
    p.add_argument("--job-id", help="Target job for a single-table import")
    p.add_argument(
        "--map", action="append", default=[], metavar="SHEET=JOB_ID",
        help="Map a workbook sheet to a job (repeatable)",
    )
    p.add_argument("--output", type=Path, help="Write the committed batch as JSON request bodies")
    p.add_argument("--config", type=Path, help=f"Config YAML (default: ${CONFIG_ENV_VAR} or config/import.yml)")
    p.add_argument("--template", type=Path, help="Write the import template CSV and exit")
    p.add_argument("--inspect-data", action="store_true", help="Print headers & first candidates then exit")
    p.add_argument("--error-log", action="store_true", help="Write the structured error log to ./logs")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _parse_mapping(raw: str) -> tuple[str, str]:
    sheet, sep, job_id = raw.rpartition("=")
    if not sep or not sheet.strip() or not job_id.strip():
        raise ValueError(f"invalid mapping '{raw}', expected SHEET=JOB_ID")
    return sheet.strip(), job_id.strip()


def _inspect_data(session: ImportSession, jobs: list[Job]) -> int:
    print(f"FILE: {session.file_name} status={session.status.value}")
    for job in active_jobs(jobs):
        print(f"  JOB: {job.id} {job.title}")
    for name, reason in session.skipped_sheets.items():
        print(f"  SKIPPED: {name} ({reason})")
    if session.sheets:
        for name, state in session.sheets.items():
            print(f"  SHEET: {name} cols={state.table.headers} rows={len(state.table.rows)}")
        return EXIT_SUCCESS
    print(f"  candidates={len(session.drafts)} dropped={session.dropped_rows}")
    for draft in session.drafts[:3]:
        print("    sample=", {k: v for k, v in draft.to_payload().items() if v not in ("", [], None)})
    return EXIT_SUCCESS


def _commit(session: ImportSession, args: argparse.Namespace, jobs: list[Job], cfg: ImportConfig) -> ImportBatch:
    if session.status == SessionStatus.READY_MULTI_SHEET:
        mappings = [_parse_mapping(m) for m in args.map]
        with ProgressTracker(len(mappings)) as progress:
            for sheet, job_id in mappings:
                progress.start_sheet(sheet)
                state = map_sheet(session, sheet, job_id, config=cfg)
                progress.finish_sheet(candidates=state.draft_count)
        return commit_all_mapped(session, jobs, config=cfg)
    return commit_single(session, args.job_id, jobs, config=cfg)


def _finish(session: ImportSession, args: argparse.Namespace, logger, batch: ImportBatch | None = None) -> None:
    if args.error_log:
        path = session.error_log.flush()
        if path is not None:
            logger.info(f"error log written: {path}")
    log_session_summary(session, batch)


def main(argv: list[str] | None = None) -> int:
    # None のときのみシステム引数を読む (テストで main([]) を呼ぶため)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")

    _load_env_file(Path(".env"))

    if args.template is not None:
        path = write_template(args.template)
        logger.info(f"template written: {path}")
        return EXIT_SUCCESS

    if args.file is None:
        logger.error("no input file given")
        return EXIT_FATAL

    config_path = args.config or (Path(os.environ[CONFIG_ENV_VAR]) if os.getenv(CONFIG_ENV_VAR) else None)
    try:
        cfg = load_config(config_path)
        jobs = load_jobs(args.jobs) if args.jobs is not None else []
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    session = load_file(args.file, config=cfg)
    if session.status == SessionStatus.ERROR:
        _finish(session, args, logger)
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(session, jobs)

    try:
        batch = _commit(session, args, jobs, cfg)
    except (CommitRejectedError, SessionStateError, KeyError, ValueError) as e:
        logger.error(f"commit rejected: {e}")
        _finish(session, args, logger)
        return EXIT_REJECTED

    if args.output is not None:
        try:
            result = hand_off(batch, JsonFileSink(args.output), chunk_size=cfg.max_batch_size)
        except HandOffError as e:
            logger.error(f"hand-off: {e}")
            _finish(session, args, logger, batch)
            return EXIT_FATAL
        logger.info(f"wrote {result.submitted} candidates in {result.chunks} requests to {args.output}")

    _finish(session, args, logger, batch)
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
