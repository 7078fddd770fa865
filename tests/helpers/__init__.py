"""Test helpers for checkbox-workflow."""
