"""molgen CLI: generate molecule codecs from a schema IR."""

import argparse
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path


def main():
    """Main CLI entry point. Runs with defaults when given no arguments."""
    # Get version for --version argument (handle PackageNotFoundError)
    try:
        molgen_version = get_version("molgen")
    except PackageNotFoundError:
        molgen_version = "dev"

    from .config import DEFAULT_OUTPUT_DIR, DEFAULT_SCHEMA_PATH

    parser = argparse.ArgumentParser(
        prog="molgen",
        description="molgen: generate molecule codecs from a schema IR"
    )
    parser.add_argument("--version", action="version", version=f"molgen {molgen_version}")
    parser.add_argument(
        "--schema",
        type=Path,
        default=DEFAULT_SCHEMA_PATH,
        help=f"Path to the schema IR JSON (defaults to '{DEFAULT_SCHEMA_PATH}')"
    )
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory for generated modules (defaults to '{DEFAULT_OUTPUT_DIR}')"
    )
    parser.add_argument(
        "--early-type",
        dest="early_types",
        action="append",
        default=None,
        help="Custom type to emit as early as its dependencies allow (repeatable; overrides the catalog list)"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Do not write; exit 1 if generated output is missing or out of date."
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )

    args = parser.parse_args()

    # Lazy import: only load the generator when a run is requested
    from .api import generate
    from .kernel.errors import GeneratorError

    try:
        result = generate(
            args.schema,
            args.out_dir,
            early_types=args.early_types,
            check=args.check,
        )
    except GeneratorError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)

    if args.check:
        if not result.up_to_date:
            print("[STALE] Generated output is out of date. Run: molgen", file=sys.stderr)
            for path in result.stale:
                print(f"  {path}", file=sys.stderr)
            sys.exit(1)
        if not args.quiet:
            print("[OK] Generated output is up to date")
        return

    if not args.quiet:
        print("[OK] Generation complete")
        print(f"  Module: {result.module_path}")
        print(f"  Index: {result.index_path}")
        print(f"  Declarations: {sum(len(names) for names in result.buckets.values())} "
              f"({len(result.buckets['custom'])} custom)")
        if not result.written:
            print("  Unchanged: output already up to date")
        for path in result.removed:
            print(f"  Removed: {path}")


if __name__ == "__main__":
    main()
