"""
Generate Tailwind-styled HTML for one component of an extracted style system.
"""
import json
import logging
from typing import Optional

from corestack.exceptions import InvalidInput
from corestack.schemas import ComponentContext, StyleSystem
from corestack.services.llm_client import GeminiClient
from corestack.services.response_parser import parse_component_envelope

logger = logging.getLogger(__name__)


def _tokens(value) -> str:
    if value is None:
        return "null"
    if hasattr(value, "model_dump"):
        value = value.model_dump(by_alias=True, exclude_none=True)
    return json.dumps(value)


def build_component_prompt(
    style_system: StyleSystem,
    component_name: str,
    component_context: Optional[ComponentContext] = None,
    user_instruction: Optional[str] = None,
) -> str:
    lines = [
        "You are an expert UI engineer using Tailwind CSS.",
        f'Your task is to generate a production-ready HTML component for a "{component_name}".',
        "",
        "STRICT DESIGN SYSTEM TO FOLLOW:",
        f"- Colors: {_tokens(style_system.colors)}",
        f"- Radius: {_tokens(style_system.radius)}",
        f"- Typography: {_tokens(style_system.typography)}",
        f"- Spacing Scale: {_tokens(style_system.spacing_scale)}",
    ]
    if style_system.principles:
        lines.append(f"- Principles: {'; '.join(style_system.principles)}")

    if component_context is not None:
        lines += ["", "OBSERVED COMPONENT (match these visual cues literally, even where they deviate from the tokens above):"]
        if component_context.variants:
            lines.append(f"- Variants: {', '.join(component_context.variants)}")
        if component_context.description:
            lines.append(f"- Description: {component_context.description}")
        if component_context.usage:
            lines.append(f"- Usage: {component_context.usage}")

    instruction = (user_instruction or "").strip()
    if instruction:
        lines += [
            "",
            "USER INSTRUCTION (takes priority over the palette and the observed component):",
            instruction,
        ]

    lines += [
        "",
        "INSTRUCTIONS:",
        '1. Return a single JSON object with a "code" field containing the HTML string.',
        "2. Use ONLY Tailwind CSS classes. Avoid arbitrary values (e.g. w-[123px]) unless needed for visual fidelity.",
        "3. Include hover, focus and active states for interactive elements.",
        "4. The component must be accessible: correct roles and aria attributes.",
        "5. Do not include <html>, <body>, prose, or markdown fences. Just the component HTML.",
        "6. Ensure high contrast and visual fidelity.",
        "",
        "Output Format:",
        '{"code": "<button class=\'...\'>...</button>"}',
    ]
    return "\n".join(lines)


def generate_component_code(
    llm: GeminiClient,
    style_system: Optional[StyleSystem],
    component_name: Optional[str],
    component_context: Optional[ComponentContext] = None,
    user_instruction: Optional[str] = None,
) -> str:
    if style_system is None or not (component_name or "").strip():
        raise InvalidInput("StyleSystem and ComponentName are required")

    component_name = component_name.strip()
    prompt = build_component_prompt(style_system, component_name, component_context, user_instruction)
    logger.info(f"Generating component code for {component_name}")
    text = llm.generate(prompt, json_output=True, use_fallback=True)
    return parse_component_envelope(text)
