"""Workflow runner: configuration mode and detection mode.

Configuration mode (a ``config`` input is present) renders a fresh checklist
and writes it. Detection mode reads the current document, compares the
checkboxes with the state embedded by the previous run, and writes the new
state back so the next run has the right baseline.

Detection mode guards against one race: the triggering event may be older
than the content we read. When a natural change is detected, the issue's
server-side ``updated_at`` is compared with the event timestamp; if the
server is newer, the live content is read again and the diff recomputed
against the same baseline. This happens once; a second concurrent edit
during the re-read and write is not detected.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from checkbox_workflow.core.action import ActionInputs, ActionOutputs
from checkbox_workflow.core.checkbox.comments import (
    BODY_PLACEHOLDER,
    attach_metadata,
    extract_previous_state,
    render_message,
    restore_template,
)
from checkbox_workflow.core.checkbox.config import load_config_pairs, parse_forced_keys
from checkbox_workflow.core.checkbox.markdown import extract_pairs, extract_state, rerender_checkboxes
from checkbox_workflow.core.checkbox.models import CheckboxState, ConfigPair
from checkbox_workflow.core.checkbox.state import (
    all_checked,
    apply_forced_checked,
    changed_keys,
    has_state_changed,
    initial_state,
)
from checkbox_workflow.core.github.client import CommentGateway
from checkbox_workflow.core.utils.time import format_iso8601, parse_iso8601, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RenderedChecklist:
    """A fully rendered document and the state embedded in it."""

    content: str
    state: CheckboxState
    pairs: List[ConfigPair]


def compose_document(
    pairs: List[ConfigPair],
    state: CheckboxState,
    template: str,
    action_id: str,
) -> str:
    """Render checkboxes into ``template`` and append the state comment."""
    checkboxes = rerender_checkboxes(pairs, state)
    message = render_message(template, checkboxes)
    return attach_metadata(message, action_id, state)


def render_configured_checklist(
    config: str,
    action_id: str,
    message: str = "",
    force_checked: Optional[str] = None,
) -> RenderedChecklist:
    """Configuration-mode rendering, without any API access.

    Raises:
        ConfigError: If ``config`` is invalid.
        InputValidationError: If ``force_checked`` is invalid.
    """
    pairs = load_config_pairs(config)
    state = initial_state(pairs)
    if force_checked:
        state = apply_forced_checked(state, parse_forced_keys(force_checked))
    # Blank template renders the bare checklist.
    template = message if message.strip() else BODY_PLACEHOLDER
    content = compose_document(pairs, state, template, action_id)
    return RenderedChecklist(content=content, state=state, pairs=pairs)


class CheckboxWorkflow:
    """One run of the checkbox workflow against a gateway.

    Args:
        gateway: Comment/issue gateway, constructed once per run
        inputs: Validated action inputs
        event_updated_at: ``updated_at`` of the issue in the triggering event;
            defaults to the time the workflow is created
    """

    def __init__(
        self,
        gateway: CommentGateway,
        inputs: ActionInputs,
        *,
        event_updated_at: Optional[datetime] = None,
    ) -> None:
        self.gateway = gateway
        self.inputs = inputs
        if event_updated_at is not None and event_updated_at.tzinfo is None:
            event_updated_at = event_updated_at.replace(tzinfo=timezone.utc)
        self.event_updated_at = event_updated_at or utc_now()

    @property
    def mode(self) -> str:
        return "config" if self.inputs.config else "detection"

    def run(self) -> ActionOutputs:
        target = "issue body" if self.inputs.body else "comment"
        logger.info("Starting action for ID: %s, Issue: #%s", self.inputs.id, self.inputs.number)
        logger.debug("Mode: %s, Target: %s", self.mode, target)

        if self.inputs.config:
            outputs = self.run_config_mode()
        else:
            outputs = self.run_detection_mode()

        logger.info("Action completed successfully")
        return outputs

    # ---- configuration mode -----------------------------------------------

    def run_config_mode(self) -> ActionOutputs:
        rendered = render_configured_checklist(
            self.inputs.config or "",
            self.inputs.id,
            self.inputs.message,
            self.inputs.force_checked,
        )

        comment_id: Optional[int] = None
        if self.inputs.body:
            issue, is_new = self.gateway.create_or_update_issue_body(
                self.inputs.number, self.inputs.id, rendered.content
            )
            logger.info("Issue body %s: %s", "created" if is_new else "updated", issue.html_url)
        else:
            comment, is_new = self.gateway.create_or_update_comment(
                self.inputs.number, self.inputs.id, rendered.content
            )
            comment_id = comment.id
            logger.info("Comment %s: %s", "created" if is_new else "updated", comment.html_url)

        # Configuration mode overwrites; it never reports a change.
        return ActionOutputs(
            retrieved=True,
            changed=False,
            state=rendered.state,
            changes=[],
            all_checked=all_checked(rendered.state),
            comment_id=comment_id,
        )

    # ---- detection mode ---------------------------------------------------

    def _fetch_content(self) -> tuple[Optional[str], Optional[int]]:
        if self.inputs.body:
            issue = self.gateway.get_issue(self.inputs.number)
            return issue.body, None
        comment = self.gateway.find_comment(self.inputs.number, self.inputs.id)
        if comment is None:
            return None, None
        return comment.body, comment.id

    def _persist(self, content: str, comment_id: Optional[int]) -> None:
        if self.inputs.body:
            self.gateway.update_issue_body(self.inputs.number, content)
        elif comment_id:
            self.gateway.update_comment(comment_id, content)

    def _recheck_staleness(self, current_state: CheckboxState) -> Optional[CheckboxState]:
        """Return the live state when the issue changed after the event, else None."""
        latest = self.gateway.get_issue(self.inputs.number)
        if not latest.updated_at:
            logger.debug("Issue has no updated_at; skipping staleness check")
            return None

        latest_updated_at = parse_iso8601(latest.updated_at)
        delay_ms = int((latest_updated_at - self.event_updated_at).total_seconds() * 1000)
        logger.debug("Event timestamp: %s", format_iso8601(self.event_updated_at))
        logger.debug("Latest update: %s (diff %sms)", latest.updated_at, delay_ms)
        if delay_ms <= 0:
            logger.debug("No conflicts detected, proceeding")
            return None

        logger.warning("Race condition detected (%sms delay)", delay_ms)
        if self.inputs.body:
            logger.debug("Getting latest state from issue body")
            return extract_state(latest.body or "")

        comment = self.gateway.find_comment(self.inputs.number, self.inputs.id)
        if comment is None:
            logger.debug("Comment not found, using current state as fallback")
            return current_state
        logger.debug("Getting latest state from comment ID %s", comment.id)
        return extract_state(comment.body)

    def run_detection_mode(self) -> ActionOutputs:
        content, comment_id = self._fetch_content()
        if not content:
            logger.info("No existing content found, nothing to detect")
            return ActionOutputs(
                retrieved=False,
                changed=False,
                state={},
                changes=[],
                all_checked=False,
                comment_id=comment_id,
            )

        current_state = extract_state(content)
        previous_state = extract_previous_state(content, self.inputs.id)
        baseline: CheckboxState = dict(previous_state or {})
        forced = self.inputs.force_checked is not None

        final_state = current_state
        if forced:
            forced_keys = parse_forced_keys(self.inputs.force_checked or "")
            final_state = apply_forced_checked(current_state, forced_keys)

            # Forced keys become the new ground truth and are written now.
            template = self.inputs.message.strip() or restore_template(content)
            logger.debug("Message processing: input=%r -> final=%r", self.inputs.message, template)
            document = compose_document(extract_pairs(content), final_state, template, self.inputs.id)
            self._persist(document, comment_id)

        changed = has_state_changed(baseline, final_state)
        changes = changed_keys(baseline, final_state)
        logger.debug("State transition: %s -> %s items", len(baseline), len(final_state))
        if changed and changes:
            logger.info("Changed: %s", ", ".join(changes))

        if changed and not forced:
            live_state = self._recheck_staleness(final_state)
            if live_state is not None:
                final_state = live_state
                changed = has_state_changed(baseline, final_state)
                changes = changed_keys(baseline, final_state)
                logger.debug("Recalculated changes: %s", ", ".join(changes))

            # Store the observed state so the next run diffs against it.
            logger.debug("Updating metadata with current state for next run")
            document = compose_document(
                extract_pairs(content), final_state, restore_template(content), self.inputs.id
            )
            self._persist(document, comment_id)

        return ActionOutputs(
            retrieved=True,
            changed=changed,
            state=final_state,
            changes=changes,
            all_checked=all_checked(final_state),
            comment_id=comment_id,
        )


__all__ = [
    "CheckboxWorkflow",
    "RenderedChecklist",
    "compose_document",
    "render_configured_checklist",
]
