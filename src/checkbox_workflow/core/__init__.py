"""Core library for checkbox-workflow (codecs, state engine, gateway, runner)."""
