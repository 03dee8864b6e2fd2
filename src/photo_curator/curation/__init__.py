"""Curation CLI: scan a photo folder and delete images without people."""

import argparse


def main() -> None:
    """CLI entry point for photo curation."""
    from photo_curator.config import (
        DEFAULT_CONFIDENCE,
        DEFAULT_FEMALE_THRESHOLD,
        DEFAULT_IOU,
        PACE_SECONDS,
        USE_ACCELERATOR,
    )

    parser = argparse.ArgumentParser(description="Photo curator")
    subparsers = parser.add_subparsers(dest="command")

    # run
    run_parser = subparsers.add_parser("run", help="Curate a folder of images")
    run_parser.add_argument("root", help="Folder to curate")
    run_parser.add_argument(
        "--no-subfolders", action="store_true", help="Do not descend into subfolders"
    )
    run_parser.add_argument(
        "--keep-non-human",
        action="store_true",
        help="Report only; never delete images without a person",
    )
    run_parser.add_argument(
        "--only-keep-female",
        action="store_true",
        help="Also delete person images where no face is estimated female",
    )
    run_parser.add_argument(
        "--device",
        choices=["cuda", "cpu"],
        default="cuda" if USE_ACCELERATOR else "cpu",
        help="Device: cuda or cpu (falls back to cpu if cuda fails)",
    )
    run_parser.add_argument(
        "--confidence",
        type=float,
        default=DEFAULT_CONFIDENCE,
        help=f"Minimum person confidence (default: {DEFAULT_CONFIDENCE})",
    )
    run_parser.add_argument(
        "--iou", type=float, default=DEFAULT_IOU, help=f"NMS IoU threshold (default: {DEFAULT_IOU})"
    )
    run_parser.add_argument(
        "--female-threshold",
        type=float,
        default=DEFAULT_FEMALE_THRESHOLD,
        help=f"Female probability needed to keep a face (default: {DEFAULT_FEMALE_THRESHOLD})",
    )
    run_parser.add_argument(
        "--pace",
        type=float,
        default=PACE_SECONDS,
        help=f"Seconds to pause between files (default: {PACE_SECONDS})",
    )
    run_parser.add_argument("--yolo-model", help="Path to the YOLO model file")
    run_parser.add_argument("--genderage-model", help="Path to genderage.onnx")
    run_parser.add_argument(
        "--report", action="store_true", help="Store decisions in the DuckDB report"
    )
    run_parser.add_argument("--db", help="Report DB path (default: project root)")
    run_parser.add_argument("--verbose", action="store_true", help="Log every decision")
    run_parser.add_argument("--log-file", help="Also write a detailed log to this file")

    # scan
    scan_parser = subparsers.add_parser("scan", help="List candidate images without curating")
    scan_parser.add_argument("root", help="Folder to scan")
    scan_parser.add_argument(
        "--no-subfolders", action="store_true", help="Do not descend into subfolders"
    )

    # report
    report_parser = subparsers.add_parser("report", help="Show stored curation runs")
    report_parser.add_argument("--run-id", help="Show the decisions of one run")
    report_parser.add_argument("--limit", type=int, default=20, help="Runs to list (default: 20)")
    report_parser.add_argument("--db", help="Report DB path (default: project root)")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return

    if args.command == "run":
        _cmd_run(args)
    elif args.command == "scan":
        _cmd_scan(args)
    elif args.command == "report":
        _cmd_report(args)


class _RichProgressObserver:
    """Bind curator progress events to a rich progress bar."""

    def __init__(self, progress, task) -> None:
        self.progress = progress
        self.task = task

    def on_progress(self, progress) -> None:
        self.progress.update(
            self.task,
            total=progress.total_count,
            completed=progress.processed_count,
            description=progress.current_file_name,
        )

    def on_finished(self, summary) -> None:
        self.progress.update(self.task, description="Done")


def _cmd_run(args: argparse.Namespace) -> None:
    """Load the models and curate a folder."""
    import signal
    import threading
    from datetime import UTC, datetime

    from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

    from photo_curator.curation.curator import BatchCurator
    from photo_curator.errors import ConfigurationError
    from photo_curator.inference.loader import load_models
    from photo_curator.log import setup_logging
    from photo_curator.models import DecisionStatus, RunConfig

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    config = RunConfig(
        use_accelerator=args.device == "cuda",
        include_subfolders=not args.no_subfolders,
        delete_non_human=not args.keep_non_human,
        only_keep_female=args.only_keep_female,
        confidence_threshold=args.confidence,
        iou_threshold=args.iou,
        female_threshold=args.female_threshold,
    )

    print(f"Loading models on {args.device}...")
    try:
        models = load_models(
            config,
            yolo_model_path=args.yolo_model,
            genderage_model_path=args.genderage_model,
        )
    except ConfigurationError as e:
        print(f"Error: {e}")
        raise SystemExit(2) from e

    # Ctrl+C stops before the next file instead of interrupting one mid-way
    cancel_event = threading.Event()
    previous_handler = signal.signal(signal.SIGINT, lambda *_: cancel_event.set())

    started_at = datetime.now(UTC)
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TextColumn("{task.completed}/{task.total}"),
        ) as progress:
            task = progress.add_task("Scanning", total=None)
            curator = BatchCurator(
                detector=models.detector,
                config=config,
                attribute_predictor=models.attribute_predictor,
                face_locator=models.face_locator,
                observer=_RichProgressObserver(progress, task),
                pace_seconds=args.pace,
            )
            summary = curator.run(args.root, cancel_event=cancel_event)
    finally:
        signal.signal(signal.SIGINT, previous_handler)
    finished_at = datetime.now(UTC)

    if summary.total_files == 0:
        print("No image files found.")
    print(f"\n{summary.describe()}")
    errors = summary.count(DecisionStatus.ERROR)
    delete_failed = summary.count(DecisionStatus.DELETE_FAILED)
    if errors > 0:
        print(f"  Unreadable or failed: {errors}")
    if delete_failed > 0:
        print(f"  Could not delete: {delete_failed}")

    if args.report:
        from photo_curator.curation.report_repository import save_run
        from photo_curator.db import get_connection

        conn = get_connection(args.db)
        run_id = save_run(conn, args.root, config, summary, started_at, finished_at)
        conn.close()
        print(f"Report stored as run {run_id}")


def _cmd_scan(args: argparse.Namespace) -> None:
    """List candidate images."""
    from photo_curator.curation.enumerator import enumerate_images

    files = enumerate_images(args.root, recursive=not args.no_subfolders)
    for path in files:
        print(path)
    print(f"Found {len(files)} image files.")


def _cmd_report(args: argparse.Namespace) -> None:
    """Show stored runs, or the decisions of one run."""
    from photo_curator.curation.report_repository import (
        get_run_decisions,
        get_run_stats,
        list_runs,
    )
    from photo_curator.db import get_connection

    conn = get_connection(args.db)
    if args.run_id:
        decisions = get_run_decisions(conn, args.run_id)
        total, deleted, errors = get_run_stats(conn, args.run_id)
        conn.close()
        for d in decisions:
            suffix = f"  ({d.error})" if d.error else ""
            print(f"  {d.status.value:<13} {d.file_path}{suffix}")
        print(f"Decisions: {total}, deleted: {deleted}, errors: {errors}")
        return

    runs = list_runs(conn, limit=args.limit)
    conn.close()
    if not runs:
        print("No curation runs recorded.")
        return
    for run in runs:
        flag = " cancelled" if run.cancelled else ""
        print(
            f"  {run.run_id}  {run.started_at:%Y-%m-%d %H:%M}  "
            f"{run.deleted_count:>5}/{run.total_files:<5} deleted{flag}  {run.root}"
        )
