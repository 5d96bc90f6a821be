"""Declarative multi-step prompting engine."""

from __future__ import annotations

from .errors import (
    DeclarationError,
    EvaluationFailure,
    PrompterFailure,
    PrompterStateError,
    WizardError,
)
from .state import UNSET, StateView, WizardState
from .prompters import (
    CANCELLED,
    DataItem,
    InputBoxPrompter,
    InputConfig,
    PickerConfig,
    Prompter,
    PrompterFactory,
    PrompterState,
    QuickPickPrompter,
    ViewPrompterFactory,
)
from .form import FieldHandle, Form, FormField
from .engine import EngineResult, StepEngine, StepOutcome
from .wizard import WIZARD_CANCELLED, Wizard

__all__ = [
    "CANCELLED",
    "DataItem",
    "DeclarationError",
    "EngineResult",
    "EvaluationFailure",
    "FieldHandle",
    "Form",
    "FormField",
    "InputBoxPrompter",
    "InputConfig",
    "PickerConfig",
    "Prompter",
    "PrompterFactory",
    "PrompterFailure",
    "PrompterState",
    "PrompterStateError",
    "QuickPickPrompter",
    "StateView",
    "StepEngine",
    "StepOutcome",
    "UNSET",
    "ViewPrompterFactory",
    "WIZARD_CANCELLED",
    "Wizard",
    "WizardError",
    "WizardState",
]
