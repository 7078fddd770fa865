"""Workflow runner (configuration and detection modes)."""
from __future__ import annotations

from .runner import CheckboxWorkflow, RenderedChecklist, compose_document, render_configured_checklist

__all__ = ["CheckboxWorkflow", "RenderedChecklist", "compose_document", "render_configured_checklist"]
