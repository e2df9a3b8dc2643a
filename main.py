import argparse
import json
import logging
import os
import sys

from tqdm import tqdm

from reviver.analysis import ProjectAnalyzer
from reviver.exception_handler import ErrorHandler
from reviver.utils import FileLoader, load_workspace_document


logger = logging.getLogger("reviver")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Derive a project scaffold plan from source snippets"
    )
    parser.add_argument(
        "path",
        help="Source file or directory to load as snippets (or a workspace JSON with --workspace)",
    )
    parser.add_argument(
        "--workspace",
        action="store_true",
        help="Treat PATH as a workspace document ({\"snippets\": [...]})",
    )
    parser.add_argument(
        "--format",
        choices=("markdown", "json"),
        default="markdown",
        help="Report output format (default: markdown)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Output file path (if not specified, prints to stdout)",
    )
    parser.add_argument(
        "--max-file-size",
        type=int,
        default=None,
        help="Maximum file size to load in bytes (default: 500KB, 0 disables)",
    )
    parser.add_argument(
        "--include-tests",
        action="store_true",
        help="Include test files (default: exclude)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )

    args = parser.parse_args()
    ErrorHandler(args.log_level)

    if not os.path.exists(args.path):
        print(f"Error: Path does not exist: {args.path}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.workspace:
            snippets = load_workspace_document(args.path)
        else:
            loader = FileLoader(
                max_file_size=args.max_file_size,
                exclude_tests=not args.include_tests,
            )
            snippets = loader.load_snippets(args.path)
    except (ValueError, json.JSONDecodeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except Exception:
        logger.exception("Failed to load snippets from %s", args.path)
        print("\n❌ Fatal error occurred. See log for details.", file=sys.stderr)
        sys.exit(1)

    report = ProjectAnalyzer().analyze(snippets)

    if args.format == "json":
        output_text = report.model_dump_json(indent=2)
    else:
        output_text = report.to_markdown()

    if args.output:
        with open(args.output, "w", encoding="utf-8") as file_handle:
            file_handle.write(output_text)
        tqdm.write(f"✅ Report saved to: {args.output}")
    else:
        print(output_text)

    if report.errors:
        tqdm.write("\n⚠️  Warnings:", file=sys.stderr)
        for message in report.errors[:5]:
            tqdm.write(f"  • {message}", file=sys.stderr)
        if len(report.errors) > 5:
            remaining = len(report.errors) - 5
            tqdm.write(f"  ... and {remaining} more", file=sys.stderr)

    if not report.files:
        sys.exit(1)


if __name__ == "__main__":
    main()
