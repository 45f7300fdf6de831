"""Command-line interface for paystub parsing and CSV export.

Provides subcommands for parsing a single paystub to JSON and for
parsing a folder of paystubs, optionally across worker threads, into
one CSV file.
"""

import argparse
import csv
import json
import sys
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from paystub_ocr.api.schemas import ParsingResponse
from paystub_ocr.ocr.document import SUPPORTED_EXTENSIONS
from paystub_ocr.parser.paystub_parser import PaystubParser
from paystub_ocr.parser.result import ParsingResult
from paystub_ocr.utils.config import AppConfig, load_config
from paystub_ocr.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_META_COLUMNS = [
    "filename",
    "status",
    "confidence",
    "processing_time_s",
    "fields_needing_verification",
    "warnings",
    "error",
]


def _find_documents(input_dir: Path) -> list[Path]:
    """Find all supported paystub files in a directory.

    Args:
        input_dir: Directory to scan for paystubs.

    Returns:
        Sorted list of paystub file paths.
    """
    return sorted(
        p for p in input_dir.iterdir()
        if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS
    )


def _result_row(result: ParsingResult, filename: str) -> dict[str, object]:
    """Flatten a parsing result into one CSV row."""
    paystub = result.paystub
    return {
        "filename": filename,
        "status": "success" if result.is_successful else "failed",
        "confidence": result.confidence.value,
        "fields_needing_verification": "; ".join(result.fields_needing_verification),
        "warnings": "; ".join(result.warnings),
        "error": "; ".join(result.errors) or None,
        "employee_name": paystub.employee_name,
        "employer_name": paystub.employer_name,
        "pay_date": paystub.pay_date,
        "pay_period_start": paystub.pay_period_start,
        "pay_period_end": paystub.pay_period_end,
        "pay_frequency": paystub.pay_frequency.value if paystub.pay_frequency else None,
        "earnings_count": len(paystub.earnings),
        "deductions_count": len(paystub.deductions),
        "total_current_earnings": paystub.total_current_earnings,
        "total_ytd_earnings": paystub.total_ytd_earnings,
        "total_current_deductions": paystub.total_current_deductions,
        "total_ytd_deductions": paystub.total_ytd_deductions,
    }


def _parse_file(file_path: Path, config: AppConfig) -> dict[str, object]:
    """Parse one paystub with its own parser and return its CSV row."""
    start_time = time.time()
    result = PaystubParser(config).parse(file_path)
    row = _result_row(result, file_path.name)
    row["processing_time_s"] = round(time.time() - start_time, 2)
    return row


def process_folder(
    input_dir: Path,
    output_csv: Path,
    workers: int = 1,
    verbose: bool = False,
    config: AppConfig | None = None,
) -> dict[str, int]:
    """Parse all paystubs in a folder and export results to CSV.

    Args:
        input_dir: Directory containing paystub files.
        output_csv: Path for the output CSV file.
        workers: Number of worker threads, each with its own parser.
        verbose: Whether to print per-file progress.
        config: Application configuration. Loaded from disk if not given.

    Returns:
        Summary dict with total, successful, and failed counts.
    """
    config = config or load_config()
    files = _find_documents(input_dir)
    if not files:
        logger.warning("No paystubs found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0}

    logger.info("Found %d paystubs to process with %d workers", len(files), workers)

    results: list[dict[str, object]] = []
    with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        future_to_file = {
            executor.submit(_parse_file, file_path, config): file_path
            for file_path in files
        }
        for i, future in enumerate(as_completed(future_to_file), 1):
            file_path = future_to_file[future]
            try:
                row = future.result()
            except Exception as exc:
                logger.error("Failed to process %s: %s", file_path.name, exc)
                row = {"filename": file_path.name, "status": "failed", "error": str(exc)}
            results.append(row)
            if verbose:
                print(f"Processed [{i}/{len(files)}]: {file_path.name} ({row['status']})")

    results.sort(key=lambda r: str(r["filename"]))
    _write_csv(results, output_csv)
    logger.info("Results written to %s", output_csv)

    successful = sum(1 for r in results if r["status"] == "success")
    summary = {"total": len(files), "successful": successful, "failed": len(files) - successful}
    _print_summary(summary, output_csv)
    return summary


def _write_csv(results: list[dict[str, object]], output_path: Path) -> None:
    """Write parsing results to a CSV file, meta columns first.

    Args:
        results: List of result dictionaries.
        output_path: Path for the output CSV file.
    """
    if not results:
        return

    all_keys: set[str] = set()
    for r in results:
        all_keys.update(r.keys())

    field_columns = sorted(all_keys - set(_META_COLUMNS))
    columns = [c for c in _META_COLUMNS if c in all_keys] + field_columns

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=columns, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(results)


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    print(f"\n{'=' * 50}")
    print("Batch Processing Complete")
    print(f"{'=' * 50}")
    print(f"Total:      {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    print(f"Output:     {output_csv}")


def parse_single(file_path: Path, config: AppConfig | None = None) -> dict[str, object]:
    """Parse a single paystub and return its JSON-ready representation.

    Args:
        file_path: Path to the paystub file.
        config: Application configuration. Loaded from disk if not given.

    Returns:
        The parsing result as plain JSON types.
    """
    result = PaystubParser(config or load_config()).parse(file_path)
    return ParsingResponse.from_result(result, filename=file_path.name).model_dump(
        mode="json"
    )


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="Paystub OCR Parser",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-c", "--config", type=Path, default=None, help="Configuration YAML file"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    batch_parser = subparsers.add_parser("batch", help="Parse a folder of paystubs")
    batch_parser.add_argument("input_dir", type=Path, help="Input directory with paystubs")
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Output CSV file (default: results.csv)",
    )
    batch_parser.add_argument(
        "-w", "--workers", type=int, default=1, help="Worker threads (default: 1)"
    )
    batch_parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    single_parser = subparsers.add_parser("parse", help="Parse a single paystub")
    single_parser.add_argument("file", type=Path, help="Paystub file to parse")
    single_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(config.log_level)

    if args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        process_folder(args.input_dir, args.output, args.workers, args.verbose, config)
    elif args.command == "parse":
        if not args.file.is_file():
            print(f"Error: {args.file} is not a file", file=sys.stderr)
            sys.exit(1)
        try:
            result = parse_single(args.file, config)
        except (FileNotFoundError, ValueError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
        output_str = json.dumps(result, indent=2)
        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(output_str)
            print(f"Output written to {args.output}")
        else:
            print(output_str)
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
