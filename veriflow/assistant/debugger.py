"""Data inconsistency analysis.

Given a description such as "the active_customers view shows fewer rows than
Customers", pull the mentioned view definitions from the store, ask the LLM
for an explanation and a proposed fix, and diff the fix against the
current definition.
"""

from __future__ import annotations

import difflib
import json
import logging
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from veriflow.context import build_debug_context
from veriflow.llm.client import LLM
from veriflow.prompts.templates import DEBUG_PROMPT, DEBUG_SYSTEM_PROMPT
from veriflow.schema import infer_schema
from veriflow.store.base import TableStore

logger = logging.getLogger(__name__)

_WORD_SPLIT_RE = re.compile(r"[\s,.:;!?()]+")
_CAMEL_RE = re.compile(r"^[A-Z][a-z]+[A-Z]")
_LOWER_CAMEL_RE = re.compile(r"^[a-z]+[A-Z]")

NON_NAMES = {"the", "a", "an", "this", "that", "my", "our"}
KNOWN_VIEW_NAMES = {
    "activecustomers",
    "active_customers",
    "customer_summary",
    "daily_active_users",
}


class DebugResult(BaseModel):
    """Explanation and optional SQL fix for an inconsistency."""

    model_config = ConfigDict(populate_by_name=True)

    explanation: str
    proposed_fix: str | None = Field(default=None, alias="proposedFix")


class DiffInfo(BaseModel):
    """Existing view definition next to the proposed replacement."""

    model_config = ConfigDict(populate_by_name=True)

    view_name: str = Field(alias="viewName")
    original_sql: str = Field(alias="originalSQL")
    proposed_sql: str = Field(alias="proposedSQL")
    has_changes: bool = Field(alias="hasChanges")
    diff: list[str] = Field(default_factory=list)


class InconsistencyReport(DebugResult):
    """Debug result plus the diff against the matched view, if any."""

    diff_info: DiffInfo | None = Field(default=None, alias="diffInfo")

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


PLACEHOLDER_EXPLANATION = (
    "Placeholder: The LLM analysis suggests the discrepancy might be due to filtering "
    "logic in a view definition that excludes certain records present in the base table."
)
PLACEHOLDER_FIX = (
    "-- Placeholder Fix: Review view definition\n"
    "ALTER VIEW YourViewName AS \n"
    "SELECT ... -- Adjusted logic here\n"
    "FROM YourTable;"
)
PLACEHOLDER_COUNT_EXPLANATION = (
    "Placeholder: Analysis indicates the view likely filters out certain records "
    "(e.g., inactive users, test transactions) that are included in the direct table count."
)
PLACEHOLDER_COUNT_FIX = (
    "-- Placeholder Fix: Check WHERE clause in the view definition for filters.\n"
    "-- Example: ALTER VIEW YourView ... REMOVE_FILTER ... ;"
)


def placeholder_result(problem_description: str) -> DebugResult:
    """Canned analysis used when no LLM answer is available."""
    text = problem_description.lower()
    if "count" in text and "lower than expected" in text:
        return DebugResult(
            explanation=PLACEHOLDER_COUNT_EXPLANATION, proposed_fix=PLACEHOLDER_COUNT_FIX
        )
    return DebugResult(explanation=PLACEHOLDER_EXPLANATION, proposed_fix=PLACEHOLDER_FIX)


def _parse_json(text: str) -> dict:
    """Parse JSON from LLM response, handling markdown code blocks."""
    text = text.strip()
    if text.startswith("```"):
        lines = [line for line in text.split("\n") if not line.strip().startswith("```")]
        text = "\n".join(lines)
    return json.loads(text)


def extract_view_names(description: str) -> list[str]:
    """Pull likely view names out of free text.

    Picks up the word before "view" (unless it is an article or pronoun),
    snake_case words, CamelCase/camelCase words and a few well-known view
    names.

    Args:
        description: User's problem description

    Returns:
        Candidate names, de-duplicated in first-seen order

    Example:
        >>> extract_view_names("The active_customers view shows 3 rows")
        ['active_customers']
    """
    words = [w for w in _WORD_SPLIT_RE.split(description) if w]
    found: list[str] = []
    for i, word in enumerate(words):
        lower = word.lower()
        if lower == "view" and i > 0 and words[i - 1].lower() not in NON_NAMES:
            found.append(words[i - 1])
        if ("_" in word and len(word) > 4) or _CAMEL_RE.match(word) or _LOWER_CAMEL_RE.match(word):
            found.append(word)
        if lower in KNOWN_VIEW_NAMES:
            found.append(word)
    return list(dict.fromkeys(found))


def build_diff_info(
    proposed_fix: str | None,
    mentioned: list[str],
    views: dict[str, dict[str, Any]],
) -> DiffInfo | None:
    """Diff the proposed fix against the first mentioned view that exists.

    Args:
        proposed_fix: SQL proposed by the debugger
        mentioned: Candidate view names from the description
        views: Stored views keyed by name

    Returns:
        DiffInfo, or None when there is no fix or no matching view
    """
    if not proposed_fix or not mentioned:
        return None

    matched: str | None = None
    for name in mentioned:
        if name in views:
            matched = name
            break
        lowered = name.lower()
        matched = next((v for v in views if v.lower() == lowered), None)
        if matched:
            break

    if matched is None:
        return None
    original = views[matched].get("definition") or ""
    if not original:
        return None

    diff = list(
        difflib.unified_diff(
            original.strip().splitlines(),
            proposed_fix.strip().splitlines(),
            fromfile=f"{matched} (current)",
            tofile=f"{matched} (proposed)",
            lineterm="",
        )
    )
    return DiffInfo(
        view_name=matched,
        original_sql=original,
        proposed_sql=proposed_fix,
        has_changes=original.strip() != proposed_fix.strip(),
        diff=diff,
    )


class InconsistencyDebugger:
    """Ask the LLM why data disagrees and how to fix it.

    Example:
        >>> debugger = InconsistencyDebugger(LLM(temperature=0))
        >>> result = await debugger.debug(problem, context)
        >>> result.proposed_fix
    """

    def __init__(self, llm: LLM | None = None):
        """Initialize the debugger.

        Args:
            llm: LLM client, or None to always use the placeholder analysis
        """
        self.llm = llm

    async def debug(self, problem_description: str, context: str) -> DebugResult:
        """Analyse an inconsistency.

        Args:
            problem_description: User's description of the discrepancy
            context: Debug context built from the schema and view definitions

        Returns:
            DebugResult (placeholder when the LLM is unavailable or fails)
        """
        if self.llm is None:
            logger.info("LLM disabled, returning placeholder analysis")
            return placeholder_result(problem_description)

        try:
            reply = await self.llm.generate(
                DEBUG_PROMPT.format(context=context), system=DEBUG_SYSTEM_PROMPT
            )
        except Exception as e:
            logger.error("Inconsistency analysis failed: %s", e)
            result = placeholder_result(problem_description)
            result.explanation = f"LLM analysis unavailable ({e}). {result.explanation}"
            return result

        try:
            return DebugResult.model_validate(_parse_json(reply))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Debugger reply was not the expected JSON: %s", e)
            return DebugResult(explanation=reply.strip(), proposed_fix=None)


async def debug_inconsistency(
    problem_description: str,
    store: TableStore,
    debugger: InconsistencyDebugger,
) -> InconsistencyReport:
    """Run the full inconsistency workflow against a loaded store.

    Args:
        problem_description: User's description of the discrepancy
        store: Loaded table store
        debugger: Debugger to call

    Returns:
        InconsistencyReport with explanation, fix and diff info
    """
    schema = infer_schema(store.document)
    mentioned = extract_view_names(problem_description)
    logger.info("Detected view names: %s", mentioned)

    views = store.views if mentioned else {}
    additional = None
    if views:
        definitions = "\n".join(
            f"View {name}:\n{view.get('definition', '')}\n" for name, view in views.items()
        )
        additional = f"Existing View Definitions:\n{definitions}"

    context = build_debug_context(problem_description, schema, additional)
    result = await debugger.debug(problem_description, context)

    diff_info = build_diff_info(result.proposed_fix, mentioned, views)
    if diff_info:
        logger.info("Diff against view '%s', changes: %s", diff_info.view_name, diff_info.has_changes)

    return InconsistencyReport(
        explanation=result.explanation,
        proposed_fix=result.proposed_fix,
        diff_info=diff_info,
    )


__all__ = [
    "InconsistencyDebugger",
    "DebugResult",
    "DiffInfo",
    "InconsistencyReport",
    "debug_inconsistency",
    "extract_view_names",
    "build_diff_info",
    "placeholder_result",
]
