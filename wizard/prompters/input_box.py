"""Free-text prompter with optional validation."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from wizard.prompters.base import CANCELLED, Prompter
from wizard.prompters.items import InputConfig
from wizard.state import UNSET

if TYPE_CHECKING:  # pragma: no cover - typing-only import path
    from wizard.prompters.host import InputView

T = TypeVar("T")

TextValidator = Callable[[str], "str | None"]


class InputBoxPrompter(Prompter[T]):
    """Ask for a line of text until it passes ``validate``.

    ``validate`` returns an error message for rejected input (the box stays
    open and the view displays the message) or ``None``/``""`` to accept it.
    Accepted text goes through ``transform`` when one is given.
    """

    def __init__(
        self,
        view: InputView,
        config: InputConfig | None = None,
        *,
        validate: TextValidator | None = None,
        transform: Callable[[str], T] | None = None,
    ) -> None:
        super().__init__()
        self._view = view
        self._config = config or InputConfig()
        self._validate = validate
        self._transform = transform

    @property
    def view(self) -> InputView:
        return self._view

    @property
    def config(self) -> InputConfig:
        return self._config

    async def _prompt(self) -> T | Any:
        config = self._config.with_steps(self.steps)
        if self.last_response is not UNSET and self.last_response is not None:
            config = replace(config, value=str(self.last_response))
        self._view.show(config)

        while True:
            text = await self._view.submit()
            if text is None:
                return CANCELLED
            message = self._validate(text) if self._validate is not None else None
            if message:
                self._view.set_validation_message(message)
                continue
            self._view.set_validation_message(None)
            if self._transform is not None:
                return self._transform(text)
            return text

    def _dispose(self) -> None:
        self._view.close()


__all__ = ["InputBoxPrompter", "TextValidator"]
