"""Shared helpers that do not depend on the wizard engine."""
