"""
CLI entry point for workerlint.

Usage:
    workerlint lint [paths...]          Lint files or directories
    workerlint lint src --json          Output diagnostics as JSON
    workerlint rules                    List available rules
    workerlint rules --docs             Show rule documentation
    workerlint parse <file>             Parse a file and show a summary
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from workerlint import __version__


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def cmd_lint(args):
    """Lint files or directories."""
    from dataclasses import replace

    from .config import ConfigError, load_config
    from .lint.linter import Linter
    from .lint.reporting import Reporter

    paths = [Path(p) for p in args.paths]
    try:
        root = paths[0] if paths and paths[0].is_dir() else Path.cwd()
        cfg = load_config(Path(args.config) if args.config else None, root=root)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2
    if not paths:
        paths = [cfg.root]

    overrides = {"json_output": args.json}
    if args.rules_tags is not None:
        overrides["tags"] = tuple(args.rules_tags)
    if args.rules_include is not None:
        overrides["include"] = tuple(args.rules_include)
    if args.rules_exclude is not None:
        overrides["exclude"] = tuple(args.rules_exclude)
    if args.jobs is not None:
        overrides["jobs"] = max(1, args.jobs)
    cfg = replace(cfg, **overrides)

    linter = Linter(config=cfg)
    files = list(linter.iter_source_files(paths))
    results = linter.lint_paths(files)

    reporter = Reporter()
    reporter.files_checked = len(files)
    for diagnostics in results.values():
        reporter.extend(diagnostics)

    if cfg.json_output:
        print(reporter.render_json())
    else:
        print(reporter.render_human())

    return 1 if reporter.has_problems else 0


def cmd_rules(args):
    """List available rules."""
    from .lint.rules import get_all_rules

    rules = get_all_rules()
    if args.json:
        print(json.dumps(
            [{"code": r.code, "tags": list(r.tags), "docs": r.docs} for r in rules],
            indent=2,
        ))
        return 0

    for rule in rules:
        tags = ", ".join(rule.tags) or "-"
        print(f"{rule.code}  [{tags}]")
        if args.docs:
            print()
            for line in rule.docs.splitlines():
                print(f"    {line}" if line else "")
            print()
    return 0


def cmd_parse(args):
    """Parse a file and show a summary."""
    from .parser import ParseError, UnsupportedFileError, parse_file

    try:
        program = parse_file(args.file, strict=False)
    except (OSError, UnsupportedFileError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    statements = [c for c in program.root.named_children if c.type != "comment"]
    print(f"Parsed: {args.file} ({program.dialect.value})")
    print(f"Top-level statements: {len(statements)}")

    if args.details:
        for child in statements[:20]:
            pos = program.range_of(child).start
            print(f"  - {child.type} (line {pos.line})")
        if len(statements) > 20:
            print(f"  ... and {len(statements) - 20} more")

    if program.root.has_error:
        try:
            parse_file(args.file)
        except ParseError as e:
            print(f"Parse error: {e}", file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workerlint",
        description="Lint JavaScript/TypeScript for Web APIs accessed via `window`",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    workerlint lint src/
    workerlint lint app.js worker.ts --json
    workerlint lint . --rules-exclude no-window-prefix
    workerlint rules --docs
"""
    )
    parser.add_argument('--version', action='version', version=f'workerlint {__version__}')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging to stderr')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # lint
    lint_p = subparsers.add_parser('lint', help='Lint files or directories')
    lint_p.add_argument('paths', nargs='*', help='Files or directories (default: .)')
    lint_p.add_argument('--json', action='store_true', help='Output as JSON')
    lint_p.add_argument('--config', metavar='FILE', help='workerlint.toml or pyproject.toml to use')
    lint_p.add_argument('--rules-tags', nargs='*', metavar='TAG', help='Use rules with these tags')
    lint_p.add_argument('--rules-include', nargs='*', metavar='CODE', help='Also run these rules')
    lint_p.add_argument('--rules-exclude', nargs='*', metavar='CODE', help='Skip these rules')
    lint_p.add_argument('-j', '--jobs', type=int, help='Lint files in parallel')
    lint_p.set_defaults(func=cmd_lint)

    # rules
    rules_p = subparsers.add_parser('rules', help='List available rules')
    rules_p.add_argument('--json', action='store_true', help='Output as JSON')
    rules_p.add_argument('--docs', action='store_true', help='Show rule documentation')
    rules_p.set_defaults(func=cmd_rules)

    # parse
    parse_p = subparsers.add_parser('parse', help='Parse a file')
    parse_p.add_argument('file', help='File to parse')
    parse_p.add_argument('-d', '--details', action='store_true', help='List top-level statements')
    parse_p.set_defaults(func=cmd_parse)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
