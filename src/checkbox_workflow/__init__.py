"""
checkbox-workflow - stateful checklists for GitHub issues and pull requests

Renders a checklist into an issue comment or body, remembers the previous
checkbox state as hidden metadata, and reports which boxes changed between
workflow runs.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
