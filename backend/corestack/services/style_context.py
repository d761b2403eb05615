"""
Active style for prompt rendering.

A StyleContext lives for one request (or one client session the caller
manages); there is no module-level instance.
"""
from typing import Optional, Tuple

from corestack.schemas import RenderOptions, StyleSystem
from corestack.services.prompt_builder import build_style_prompt


class StyleContext:
    def __init__(self, system: Optional[StyleSystem] = None, prompt: Optional[str] = None):
        self._system = system
        self._prompt = prompt

    def get(self) -> Tuple[Optional[StyleSystem], Optional[str]]:
        return self._system, self._prompt

    def set(self, system: Optional[StyleSystem], prompt: Optional[str]) -> None:
        self._system = system
        self._prompt = prompt

    def clear(self) -> None:
        self.set(None, None)

    @property
    def is_active(self) -> bool:
        return bool(self._prompt)

    @classmethod
    def from_options(cls, options: RenderOptions) -> "StyleContext":
        """
        Build the context a render request asks for.

        An explicit style prompt wins; a bare style system is rendered for the
        requested target platform.
        """
        context = cls()
        prompt = (options.style_prompt or "").strip()
        if prompt:
            context.set(options.style_system, prompt)
        elif options.style_system is not None:
            context.set(options.style_system, build_style_prompt(options.style_system, options.target_platform))
        return context
