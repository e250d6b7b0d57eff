"""Restricted include check."""

from __future__ import annotations

import fnmatch
import re
from pathlib import PurePath
from typing import TYPE_CHECKING

from thriftlint.engine.check import SingleFileCheck
from thriftlint.idl.nodes import Include

if TYPE_CHECKING:
    from collections.abc import Sequence

    from thriftlint.engine.check import CheckContext
    from thriftlint.engine.diagnostic import Diagnostic


def check_include_restricted(restrictions: Sequence[tuple[str, str]]) -> SingleFileCheck:
    """Forbid includes matching a regex when the including file matches a glob.

    *restrictions* is a sequence of ``(file_glob, include_regex)`` pairs.  The
    glob is tried against both the including file's path and its base name,
    so ``"*"`` applies everywhere.
    """
    compiled = [(glob, re.compile(pattern)) for glob, pattern in restrictions]

    def fn(ctx: CheckContext, node: Include) -> list[Diagnostic]:
        filename = PurePath(ctx.filename)
        for glob, pattern in compiled:
            if not (
                fnmatch.fnmatch(filename.as_posix(), glob) or fnmatch.fnmatch(filename.name, glob)
            ):
                continue
            if pattern.search(node.path):
                return [ctx.error(node, f'"{node.path}" is a restricted import')]
        return []

    return SingleFileCheck("include.restricted", (Include,), fn)
