#!/usr/bin/env python3
"""
Audio Dedupe CLI — find audio files whose names say they are the same track.
Implements the same engine as the GUI worker but with console-based interaction.
All deletions are safe: files are moved to the system trash, never erased.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import json
import os
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

from audiodedupe.core.models import (
    AnalysisParams, AudioFile, DuplicateGroup, KeepStrategy, MIN_THRESHOLD, MAX_THRESHOLD,
    DEFAULT_THRESHOLD)
from audiodedupe.commands import AnalysisCommand
from audiodedupe.utils.convert_utils import ConvertUtils
from audiodedupe.services.file_service import FileService
from audiodedupe.services.duplicate_service import DuplicateService
from audiodedupe.aliases import (
    KEEP_ALIASES, KEEP_CHOICES, KEEP_HELP_TEXT, VERSION_POLICIES, VERSION_POLICY_HELP_TEXT,
    THRESHOLD_HELP_TEXT, EPILOG_TEXT
)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

        # Windows consoles choke on non-ASCII track names otherwise
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="audiodedupe",
            description="Audio Dedupe — find duplicate audio files by name, with safe deletion",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        source = parser.add_mutually_exclusive_group(required=True)
        source.add_argument(
            "--input", "-i",
            type=str,
            help="Music directory to scan for duplicates"
        )
        source.add_argument(
            "--from-list",
            type=str,
            metavar='FILE',
            dest="from_list",
            help="Read file paths (one per line) from FILE instead of scanning; '-' reads stdin"
        )

        parser.add_argument(
            "--threshold", "-t",
            default=DEFAULT_THRESHOLD,
            type=float,
            metavar='',
            help=THRESHOLD_HELP_TEXT
        )
        parser.add_argument(
            "--extensions", "-x",
            nargs="+",
            default=[],
            type=str,
            metavar='',
            help="Audio extensions (space separated) to include. Default: .mp3 .wav .flac .m4a .ogg .aac .aiff"
        )
        parser.add_argument(
            "--excluded-dirs", '-e',
            nargs="+",
            default=[],
            type=str,
            metavar='',
            dest="excluded_dirs",
            help="Excluded/ignored directories (space separated)"
        )
        parser.add_argument(
            "--min-size", "-m",
            default="0",
            type=str,
            metavar='',
            help="Minimum file size (e.g., 500KB, 1MB). Default: 0"
        )
        parser.add_argument(
            "--keep-versions",
            action="store_true",
            dest="keep_versions",
            help=VERSION_POLICY_HELP_TEXT
        )
        parser.add_argument(
            "--keep",
            choices=KEEP_CHOICES,
            default="first",
            type=str,
            help=KEEP_HELP_TEXT
        )

        # Actions
        parser.add_argument(
            "--delete",
            action="store_true",
            help="Keep one file per duplicate group and move the rest to trash.\n"
                 "Always shows a preview before deletion."
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Skip confirmation prompt when used with --delete (for automation/scripts)"
        )

        # Output options
        parser.add_argument(
            "--json",
            action="store_true",
            dest="json_output",
            help="Print duplicate groups as JSON"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics and progress"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if not MIN_THRESHOLD <= args.threshold <= MAX_THRESHOLD:
            self.error_exit(
                f"Threshold must be between {MIN_THRESHOLD} and {MAX_THRESHOLD}, got {args.threshold}"
            )

        if args.force and not args.delete:
            self.error_exit("--force can only be used with --delete")

        if args.delete and args.json_output:
            self.error_exit("--json cannot be combined with --delete")

        if args.delete and not args.force:
            if args.from_list == "-":
                self.error_exit(
                    "Cannot ask for confirmation while reading paths from stdin.\n"
                    "Use --force to proceed without confirmation."
                )
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force flag to proceed without confirmation when piping output or running in scripts."
                )

        if args.input is not None:
            root_path = Path(args.input).resolve()
            if not root_path.exists():
                self.error_exit(f"Directory not found: {args.input}")
            if not root_path.is_dir():
                self.error_exit(f"Path is not a directory: {args.input}")

        if args.from_list not in (None, "-") and not Path(args.from_list).is_file():
            self.error_exit(f"Path list not found: {args.from_list}")

        if not ConvertUtils.is_valid_size_format(args.min_size):
            self.error_exit(f"Invalid size format: {args.min_size}")

        for excl_dir in args.excluded_dirs:
            excl_path = Path(excl_dir).resolve()
            if not excl_path.exists():
                self.warning(f"Excluded directory not found: {excl_dir}")
            elif not excl_path.is_dir():
                self.warning(f"Excluded path is not a directory: {excl_dir}")

    def create_params(self, args: argparse.Namespace) -> AnalysisParams:
        """Create AnalysisParams from CLI arguments."""
        try:
            return AnalysisParams.from_human_readable(
                root_dir=str(Path(args.input).resolve()),
                threshold=args.threshold,
                min_size_str=args.min_size,
                extensions_str=",".join(args.extensions),
                excluded_dirs=[str(Path(d.strip()).resolve()) for d in args.excluded_dirs],
                version_policy=VERSION_POLICIES[args.keep_versions],
                keep_strategy=KEEP_ALIASES.get(args.keep, KeepStrategy.FIRST),
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    @staticmethod
    def read_path_list(source: str) -> List[str]:
        """
        Paths from a list file or stdin ('-'), one per line, blank lines skipped.
        Native paths are converted to '/' separators here; on POSIX a backslash stays part of the name.
        """
        if source == "-":
            lines = sys.stdin.read().splitlines()
        else:
            lines = Path(source).read_text(encoding="utf-8").splitlines()
        return [Path(line.strip()).as_posix() for line in lines if line.strip()]

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} audio files found...")
        sys.stderr.flush()

    @staticmethod
    def stopped_flag() -> bool:
        """Check if operation should stop (placeholder for signal handling)."""
        return False

    def run_analysis(self, args: argparse.Namespace, command: AnalysisCommand) -> List[DuplicateGroup]:
        """Execute the analysis workflow for a directory or a path list."""
        callback = self.progress_callback if self.verbose else None
        try:
            if args.from_list is not None:
                paths = self.read_path_list(args.from_list)
                groups, stats = command.analyze_paths(
                    paths,
                    threshold=args.threshold,
                    policy=VERSION_POLICIES[args.keep_versions],
                    progress_callback=callback,
                    strategy=KEEP_ALIASES.get(args.keep, KeepStrategy.FIRST)
                )
            else:
                params = self.create_params(args)
                if not self.quiet and not args.json_output:
                    print(f"Scanning directory: {params.root_dir}")
                groups, stats = command.execute(
                    params,
                    progress_callback=callback,
                    stopped_flag=self.stopped_flag
                )
        except (RuntimeError, OSError) as e:
            self.error_exit(f"Analysis failed: {e}")

        if self.verbose:
            sys.stderr.write("\n")
            print(stats.print_summary(), file=sys.stderr)

        return groups

    def output_results(self, groups: List[DuplicateGroup]) -> None:
        """Output duplicate groups as plain text, most similar first."""
        if self.quiet:
            return

        if not groups:
            print("No duplicate groups found.")
            return

        total_files = sum(len(g.files) for g in groups)
        print(f"\nFound {len(groups)} duplicate groups ({total_files} files)")

        for idx, group in enumerate(groups, 1):
            score = ConvertUtils.score_to_percent(group.similarity_score)
            print(f"\n🎵 Group {idx} | Similarity: {score} | Files: {len(group.files)}")
            print(f"   {group.reason}")
            for path in group.files:
                print(f"   {path}")

    @staticmethod
    def output_json(groups: List[DuplicateGroup]) -> None:
        print(json.dumps([g.to_dict() for g in groups], indent=2, ensure_ascii=False))

    def execute_delete(
            self,
            groups: List[DuplicateGroup],
            files_by_path: Dict[str, AudioFile],
            strategy: KeepStrategy,
            force: bool = False
    ) -> None:
        """Keep one file per group, trash the rest. Always shows preview before deletion."""
        if not groups:
            if not self.quiet:
                print("No duplicate groups found.")
            return

        review_groups = DuplicateService.to_review_groups(groups, files_by_path, strategy)
        files_to_delete = DuplicateService.files_to_delete(review_groups)
        if not files_to_delete:
            if not self.quiet:
                print("No files to delete.")
            return

        space_saved = sum(files_by_path[p].size for p in files_to_delete if p in files_by_path)
        space_saved_str = ConvertUtils.bytes_to_human(space_saved)

        print()
        for idx, group in enumerate(review_groups, 1):
            score = ConvertUtils.score_to_percent(group.similarity_score)
            print(f"🎵 Group {idx} | Similarity: {score} | Files: {len(group.files)}")
            print("-" * 60)
            for path in group.files:
                marker = "[DEL] " if path in group.selection else "[KEEP]"
                size = files_by_path[path].size if path in files_by_path else 0
                print(f"   {marker} {path} [{ConvertUtils.bytes_to_human(size)}]")
            print()

        print("=" * 60)
        print(f"Summary: keep 1 file per group ({len(review_groups)} files preserved, "
              f"{len(files_to_delete)} files deleted)")
        print(f"Keep strategy: {strategy.display_name}")
        print(f"Total space saved: {space_saved_str}")
        print()

        if force:
            print("⚠️  WARNING: --force flag skips confirmation. Proceeding with deletion...")
        else:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Lost interactive terminal during operation. "
                    "Use --force to proceed in non-interactive environments."
                )
            response = input(f"Are you sure you want to move {len(files_to_delete)} files to trash? [y/N]: ")
            if response.strip().lower() not in ("y", "yes"):
                print("Deletion cancelled by user.")
                return

        print(f"\nMoving {len(files_to_delete)} files to trash...")
        report = FileService.move_multiple_to_trash(files_to_delete)

        if report.failed:
            print(f"\n⚠️  Partial success: {len(report.deleted)}/{len(files_to_delete)} files moved to trash.")
            print(f"Failed to delete {len(report.failed)} file(s):")
            print(FileService.summarize_failures(report))
        else:
            print(f"✅ Successfully moved {len(report.deleted)} files to trash.")
            print(f"Total space saved: {space_saved_str}")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        if self.verbose:
            logging.getLogger("audiodedupe").setLevel(logging.DEBUG)

        self.validate_args(args)

        command = AnalysisCommand()
        groups = self.run_analysis(args, command)

        if args.delete:
            self.execute_delete(
                groups,
                command.files_by_path(),
                KEEP_ALIASES.get(args.keep, KeepStrategy.FIRST),
                force=args.force
            )
        elif args.json_output:
            self.output_json(groups)
        else:
            self.output_results(groups)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds", file=sys.stderr)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
