"""Student records domain - Constants.

Category names used in results and the default column conventions of the
hours workbooks. Deployments override the conventions through Settings.
"""

from __future__ import annotations

from typing import Sequence

CATEGORY_A = "cocurriculares"
CATEGORY_B = "liderazgo"

# Identifier column aliases; a header matches when it equals or contains one
DEFAULT_IDENTIFIER_ALIASES: Sequence[str] = ("cod", "código", "codigo", "fv", "fff")

DEFAULT_CATEGORY_A_LABEL = "revisiones pendientes cocurriculares"
DEFAULT_CATEGORY_B_LABEL = "revisiones pendientes liderazgo"
DEFAULT_PENDING_REVIEW_MARKER = "revisiones pendientes"

# Placeholders typed into cells with nothing to report
DEFAULT_IGNORED_VALUES: Sequence[str] = ("-", "/")
