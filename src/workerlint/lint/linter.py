"""
workerlint engine

Runs the selected rules over JavaScript/TypeScript programs and collects
their diagnostics.

Usage:
    linter = Linter()
    diagnostics = linter.lint_source("window.fetch()", "app.js")
    results = linter.lint_paths([Path("src")], jobs=4)
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from workerlint.config import LintConfig, should_exclude_path
from workerlint.lint.context import Context
from workerlint.lint.diagnostics import Diagnostic
from workerlint.lint.ignore import collect_directives
from workerlint.lint.rule import LintRule
from workerlint.lint.rules import get_filtered_rules
from workerlint.parser.parser import (
    EXTENSION_DIALECTS,
    Dialect,
    ParsedProgram,
    ParseError,
    Position,
    SourceRange,
    parse_file,
    parse_source,
)

logger = logging.getLogger(__name__)

PARSE_ERROR_CODE = "parse-error"
READ_ERROR_CODE = "read-error"


def _point_range(line: int, col: int) -> SourceRange:
    pos = Position(line=line, col=col, byte=0)
    return SourceRange(start=pos, end=pos)


class Linter:
    """
    Main linter class that runs rules against JS/TS programs.
    """

    def __init__(self, rules: Optional[List[LintRule]] = None, config: Optional[LintConfig] = None):
        self.config = config or LintConfig()
        if rules is None:
            rules = get_filtered_rules(self.config.tags, self.config.include, self.config.exclude)
        self.rules = rules

    def lint_program(self, program: ParsedProgram) -> List[Diagnostic]:
        """Run every rule over a parsed program."""
        ctx = Context(program)
        for rule in self.rules:
            rule.lint_program(ctx, program)

        directives = collect_directives(program, self.config.ignore_directive)
        diagnostics = directives.filter(ctx.diagnostics)
        return sorted(diagnostics, key=Diagnostic.sort_key)

    def lint_source(
        self,
        text: Union[str, bytes],
        filename: str = "<input>",
        dialect: Optional[Dialect] = None,
    ) -> List[Diagnostic]:
        """Parse and lint source text."""
        try:
            program = parse_source(text, filename=filename, dialect=dialect)
        except ParseError as e:
            return [self._parse_error(e)]
        return self.lint_program(program)

    def lint_file(self, file_path: Path) -> List[Diagnostic]:
        """Lint a file and return all diagnostics."""
        try:
            program = parse_file(file_path)
        except ParseError as e:
            return [self._parse_error(e)]
        except OSError as e:
            logger.warning("Cannot read %s: %s", file_path, e)
            return [Diagnostic(
                filename=str(file_path),
                range=_point_range(0, 0),
                code=READ_ERROR_CODE,
                message=f"Cannot read file: {e.strerror or e}",
            )]
        return self.lint_program(program)

    def iter_source_files(self, paths: Iterable[Path]) -> Iterator[Path]:
        """Expand files and directories into the source files to lint."""
        extensions = set(self.config.extensions)
        for path in paths:
            path = Path(path)
            if path.is_file():
                if path.suffix.lower() in EXTENSION_DIALECTS:
                    yield path
                else:
                    logger.warning("Unsupported file type, skipping: %s", path)
                continue
            if not path.is_dir():
                logger.warning("No such file or directory: %s", path)
                continue
            for file_path in sorted(path.rglob("*")):
                if not file_path.is_file() or file_path.suffix not in extensions:
                    continue
                if should_exclude_path(self.config, file_path.relative_to(path)):
                    logger.debug("skipping excluded %s", file_path)
                    continue
                yield file_path

    def lint_paths(self, paths: Iterable[Path], jobs: Optional[int] = None) -> Dict[str, List[Diagnostic]]:
        """
        Lint every source file under the given paths.

        Returns {filename: diagnostics} for files that have any. Files are
        independent, so with jobs > 1 they are linted on a thread pool.
        """
        files = list(self.iter_source_files(paths))
        jobs = jobs or self.config.jobs
        logger.debug("linting %d files with %d job(s)", len(files), jobs)

        if jobs > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=jobs) as pool:
                all_diagnostics = list(pool.map(self.lint_file, files))
        else:
            all_diagnostics = [self.lint_file(f) for f in files]

        results = {}
        for file_path, diagnostics in zip(files, all_diagnostics):
            if diagnostics:
                results[str(file_path)] = diagnostics
        return results

    def _parse_error(self, error: ParseError) -> Diagnostic:
        logger.debug("parse error: %s", error)
        return Diagnostic(
            filename=error.filename,
            range=_point_range(error.line, error.column),
            code=PARSE_ERROR_CODE,
            message=f"Parse error: {error.reason}",
        )


def lint_source(text: Union[str, bytes], filename: str = "<input>") -> List[Diagnostic]:
    """Convenience function to lint source text with the default rules."""
    return Linter().lint_source(text, filename)


def lint_file(file_path: Path) -> List[Diagnostic]:
    """Convenience function to lint a file."""
    return Linter().lint_file(file_path)
