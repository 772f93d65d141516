# src/projcontext/cli.py
import sys
import time
import argparse
from pathlib import Path

# Module imports
from projcontext.config import CONTEXTIGNORE_FILE, ContextConfig
from projcontext.core.aggregate import build_document
from projcontext.core.filters import FilterChain
from projcontext.core.ignore import load_ignore_spec
from projcontext.core.scanner import ProjectScanner
from projcontext.core.sink import (
    SinkError,
    copy_to_clipboard,
    format_kb,
    get_default_output_name,
    write_output_file,
)
from projcontext.core.tree import generate_project_tree

EPILOG = """\
Output filename: {current-directory-name}-project_context.txt

examples:
  project-context         # Export to file (default)
  project-context -c      # Export to clipboard only
  project-context -fc     # Export to both file and clipboard

Respects .gitignore (and an optional .contextignore), filters out binary and
large files, and includes the directory structure plus file contents.
"""


class UsageArgumentParser(argparse.ArgumentParser):
    """Argument errors print usage to stderr and exit with status 1."""

    def parse_args(self, args=None, namespace=None):
        args = sys.argv[1:] if args is None else list(args)
        # argparse swallows a bare "--"; no positionals means nothing may follow it
        if "--" in args:
            self.error("unrecognized arguments: --")
        return super().parse_args(args, namespace)

    def error(self, message):
        self.print_help(sys.stderr)
        self.exit(1, f"\n{self.prog}: error: {message}\n")


def create_arg_parser():
    parser = UsageArgumentParser(
        prog="project-context",
        description="Generates project context (tree + file contents) for the current directory only.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument("-f", dest="to_file", action="store_true", help="Export to file")
    parser.add_argument("-c", dest="to_clipboard", action="store_true", help="Export to clipboard")
    parser.add_argument("-y", "--yes", action="store_true", help="Skip the pause before large scans")
    parser.add_argument("-d", "--debug", action="store_true", help="Print every include/skip decision to stderr")
    return parser


def print_token_report(document) -> None:
    ranked = sorted(document.files, key=lambda x: x.token_count, reverse=True)

    print("\n--- Top 10 Largest Files (Est. Tokens) ---")
    print(f"{'Rank':<5} | {'Tokens':<10} | {'File Path'}")
    print("-" * 60)
    for i, f in enumerate(ranked[:10]):
        print(f"{i+1:<5} | {f.token_count:<10} | {f.rel_path}")
    print("-" * 60)
    print(f"Total tokens: {document.total_tokens}")
    print("-" * 60)


def main():
    try:
        # 1. Setup
        parser = create_arg_parser()
        args = parser.parse_args()

        to_file, to_clipboard = args.to_file, args.to_clipboard
        if not to_file and not to_clipboard:
            to_file = True

        config = ContextConfig.default()
        root_dir = Path.cwd().resolve()
        output_file_name = get_default_output_name(root_dir)
        output_file = root_dir / output_file_name

        print(f"Generating project context for: {root_dir}")
        if to_file and to_clipboard:
            print(f"Output: File ({output_file_name}) + Clipboard")
        elif to_file:
            print(f"Output: File ({output_file_name})")
        else:
            print("Output: Clipboard only")
        print()

        # 2. Ignore Rules: never pick up our own output
        extra_spec = load_ignore_spec(root_dir / CONTEXTIGNORE_FILE, extra_patterns=[output_file_name])
        chain = FilterChain.for_root(root_dir, config, extra_spec=extra_spec)

        # 3. Scanning
        print("Scanning for files to include...")
        scanner = ProjectScanner(root_dir, chain, debug=args.debug)
        files_to_merge = scanner.scan()
        total_files = len(files_to_merge)
        print(f"Found {total_files} files to process")

        if total_files > config.scan_warning_threshold:
            print(f"Warning: This will process {total_files} files. This might take a while.")
            if not args.yes:
                print(f"Press Ctrl+C within {config.scan_warning_delay} seconds to cancel...")
                time.sleep(config.scan_warning_delay)

        # 4. Output Generation
        tree_str = generate_project_tree(root_dir, config.ignore_patterns)
        document = build_document(root_dir, files_to_merge, tree_str, config.max_files)

        if to_clipboard:
            try:
                copy_to_clipboard(document.text)
                print("✓ Context copied to clipboard successfully!")
            except SinkError as e:
                print(f"❌ Error: {e}", file=sys.stderr)
                print("❌ Failed to copy to clipboard", file=sys.stderr)

        output_size = None
        if to_file:
            try:
                output_size = write_output_file(output_file, document.text)
            except SinkError as e:
                print(f"Error writing file: {e}", file=sys.stderr)
                sys.exit(1)

        # 5. Review & Stats
        print("✓ Context generated successfully")
        print(f"✓ Processed {total_files} files")
        if document.truncated:
            print(f"⚠️  Warning: Output limited to the first {config.max_files:,} files", file=sys.stderr)

        if output_size is not None:
            print(f"✓ File: {output_file_name} ({format_kb(output_size)})")
            if output_size > config.output_size_warning:
                print(
                    f"⚠️  Warning: Output file is larger than "
                    f"{config.output_size_warning // 1024 // 1024}MB ({output_size // 1024 // 1024}MB)",
                    file=sys.stderr,
                )

        if to_clipboard:
            print(f"✓ Clipboard: {format_kb(len(document.text))}")

        if document.files:
            print_token_report(document)

    except KeyboardInterrupt:
        print("\nCancelled.")
        sys.exit(1)

    except Exception as e:
        print(f"An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
