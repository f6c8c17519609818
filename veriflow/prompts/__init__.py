"""Prompt templates for the SQL generator and the inconsistency debugger."""
