"""Harness for exercising wizards and prompters without a real host."""

from __future__ import annotations

from .headless import HeadlessHost, HeadlessInputView, HeadlessPickerView, ShownPrompt, UserScript
from .prompter_tester import PrompterTester
from .wizard_tester import FieldInspector, WizardTester

__all__ = [
    "FieldInspector",
    "HeadlessHost",
    "HeadlessInputView",
    "HeadlessPickerView",
    "PrompterTester",
    "ShownPrompt",
    "UserScript",
    "WizardTester",
]
