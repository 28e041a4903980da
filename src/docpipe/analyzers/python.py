# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Python docstring analyzer implementation."""

import ast
import logging
import re
from dataclasses import dataclass

from docpipe.analyzer import AnalysisFailure
from docpipe.model import ErrorRecord
from docpipe.severity import Severity

logger = logging.getLogger(__name__)

_IMPLICIT_ARGUMENTS = frozenset({"self", "cls"})


@dataclass(frozen=True)
class _NodeContext:
    scope: str
    prefix: str = ""


class PythonAnalyzer:
    """Check Python files for missing or incomplete docstrings."""

    def analyze(self, path: str, source: str) -> list[ErrorRecord]:
        """Analyze one Python file.

        Args:
            path: Project-relative file path, used in messages.
            source: Decoded file content.

        Returns:
            Recorded errors ordered by source position.

        Raises:
            AnalysisFailure: If the source cannot be parsed.
        """
        try:
            tree = ast.parse(source, filename=path)
        except (SyntaxError, ValueError) as exc:
            logger.warning(f"Failed to parse file (file_path={path} error={exc})")
            raise AnalysisFailure(path=path, message=str(exc)) from exc

        if not tree.body:
            return [ErrorRecord(Severity.INFO, "File %s is empty", (path,), line=1)]

        errors: list[ErrorRecord] = []
        if ast.get_docstring(tree) is None:
            errors.append(
                ErrorRecord(
                    Severity.ERROR, "No summary was found for file %s", (path,), line=1
                )
            )
        errors.extend(self._check_body(tree.body, _NodeContext(scope="module")))
        logger.debug(f"Analyzed file (file_path={path} errors={len(errors)})")
        return errors

    def _check_body(
        self, body: list[ast.stmt], context: _NodeContext
    ) -> list[ErrorRecord]:
        errors: list[ErrorRecord] = []
        for node in body:
            if isinstance(node, ast.ClassDef):
                qualified_name = f"{context.prefix}{node.name}"
                errors.extend(self._check_definition(node, "class", qualified_name))
                errors.extend(
                    self._check_body(
                        node.body,
                        _NodeContext(scope="class", prefix=f"{qualified_name}."),
                    )
                )
            elif isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                kind = "method" if context.scope == "class" else "function"
                qualified_name = f"{context.prefix}{node.name}"
                errors.extend(self._check_definition(node, kind, qualified_name))
                errors.extend(
                    self._check_body(
                        node.body,
                        _NodeContext(scope="function", prefix=f"{qualified_name}."),
                    )
                )
        return errors

    def _check_definition(
        self,
        node: ast.ClassDef | ast.FunctionDef | ast.AsyncFunctionDef,
        kind: str,
        qualified_name: str,
    ) -> list[ErrorRecord]:
        docstring = ast.get_docstring(node)
        if docstring is None:
            severity = Severity.NOTICE if node.name.startswith("_") else Severity.ERROR
            return [
                ErrorRecord(
                    severity, f"No summary for {kind} %s", (qualified_name,), node.lineno
                )
            ]
        if isinstance(node, ast.ClassDef):
            return []
        return [
            ErrorRecord(
                Severity.WARNING,
                "Argument %s is missing from the docstring of %s",
                (argument, qualified_name),
                node.lineno,
            )
            for argument in self._argument_names(node)
            if not re.search(rf"\b{re.escape(argument)}\b", docstring)
        ]

    def _argument_names(
        self, node: ast.FunctionDef | ast.AsyncFunctionDef
    ) -> list[str]:
        arguments = node.args
        names = [
            arg.arg
            for arg in [*arguments.posonlyargs, *arguments.args, *arguments.kwonlyargs]
        ]
        if arguments.vararg is not None:
            names.append(arguments.vararg.arg)
        if arguments.kwarg is not None:
            names.append(arguments.kwarg.arg)
        return [name for name in names if name not in _IMPLICIT_ARGUMENTS]
