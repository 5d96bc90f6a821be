"""Interactive prompters and the host boundary they render through."""

from __future__ import annotations

from .base import CANCELLED, Prompter, PrompterState
from .items import DataItem, InputConfig, PickerConfig, PromptConfig, items_from_values
from .input_box import InputBoxPrompter, TextValidator
from .quick_pick import ItemSource, QuickPickPrompter
from .host import InputView, PickerView, PrompterFactory, ViewPrompterFactory

__all__ = [
    "CANCELLED",
    "DataItem",
    "InputBoxPrompter",
    "InputConfig",
    "InputView",
    "ItemSource",
    "PickerConfig",
    "PickerView",
    "PromptConfig",
    "Prompter",
    "PrompterFactory",
    "PrompterState",
    "QuickPickPrompter",
    "TextValidator",
    "ViewPrompterFactory",
    "items_from_values",
]
