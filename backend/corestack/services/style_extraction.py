"""
Style extraction: turn CSS, a written description or a screenshot into a StyleSystem.
"""
import base64
import binascii
import io
import logging
from typing import List, Optional, Tuple, get_args

from PIL import Image

from corestack.exceptions import InvalidInput
from corestack.schemas import COMPONENT_NAMES, ExtractionMode, StyleSystem
from corestack.services.llm_client import GeminiClient, image_part
from corestack.services.prompt_builder import build_style_prompt
from corestack.services.response_parser import parse_style_system
from corestack.services.settings_loader import get_style_source_max_chars

logger = logging.getLogger(__name__)

EXTRACTION_MODES = get_args(ExtractionMode)
DEFAULT_IMAGE_MIME = "image/jpeg"

STYLE_SYSTEM_SCHEMA = """{
  "colors": {
    "primary": "string (required)",
    "primarySoft": "string (optional, lighter/softer version of primary)",
    "accent": "string (optional)",
    "background": "string (required)",
    "surface": "string (optional, card/panel background)",
    "border": "string (optional)",
    "text": "string (required)",
    "mutedText": "string (optional)",
    "success": "string (optional)",
    "error": "string (optional)"
  },
  "typography": {
    "fontFamilyBase": "string (required)",
    "fontFamilyHeading": "string (optional)",
    "scale": {
      "h1": {"size": "string", "weight": "number", "lineHeight": "number | string"},
      "h2": {"size": "string", "weight": "number", "lineHeight": "number | string"},
      "h3": {"size": "string", "weight": "number", "lineHeight": "number | string"},
      "body": {"size": "string", "weight": "number", "lineHeight": "number | string"},
      "small": {"size": "string", "weight": "number", "lineHeight": "number | string"}
    }
  },
  "spacingScale": [4, 8, 12, 16, 24],
  "radius": {"button": "string", "card": "string", "input": "string", "chip": "string"},
  "shadows": {"<name>": "CSS box-shadow value"},
  "components": [
    {"name": "string", "variants": ["string"], "description": "string", "usage": "string"}
  ],
  "principles": ["string"]
}"""


def _extraction_rules() -> List[str]:
    names = ", ".join(f'"{name}"' for name in COMPONENT_NAMES)
    return [
        "1. Fill every required field. If the input does not state a value, infer a sensible default "
        "consistent with the rest of the design (typography.scale.body is always required).",
        "2. Cluster near-duplicate colours into a single token instead of listing each shade.",
        f"3. 'components' may ONLY use these exact names: {names}. Any other name makes the whole "
        "response invalid. Include a component only if it is clearly visible or described. For each "
        "one give its visible variants (e.g. \"primary\", \"outline\"), a visual description (shape, "
        "colour, shadow) and a brief usage note.",
        "4. Never list the same component name twice; a duplicated name also makes the response invalid.",
        "5. 'principles' are short statements of the overall visual language (e.g. \"Generous whitespace\").",
        "6. Return ONLY the JSON object. No markdown formatting, no code fences, no commentary.",
    ]


def validate_mode(mode: Optional[str]) -> str:
    if mode not in EXTRACTION_MODES:
        raise InvalidInput(f"Unsupported mode: {mode!r}. Expected one of {', '.join(EXTRACTION_MODES)}")
    return mode


def build_extraction_prompt(mode: str, source: str, max_source_chars: Optional[int] = None) -> str:
    """
    Build the extraction instructions for one request.

    For "image" mode the source is not embedded (the image travels as a
    separate part); otherwise the source is truncated and fenced.
    """
    validate_mode(mode)
    if max_source_chars is None:
        max_source_chars = get_style_source_max_chars()

    lines = [
        "You are an expert design system engineer.",
        "Your task is to analyze the following input and extract a strict design system.",
        "",
        f"Input Mode: {mode}",
    ]
    if mode == "image":
        lines.append("Analyze the uploaded image to extract colors, typography, and component styles.")
    else:
        truncated = source[:max_source_chars]
        if len(source) > max_source_chars:
            logger.info(f"Style source truncated from {len(source)} to {max_source_chars} chars")
        lines += ["Input Data:", "```", truncated, "```"]

    lines += [
        "",
        "Output must be a single valid JSON object with this shape:",
        STYLE_SYSTEM_SCHEMA,
        "",
        "Rules:",
    ]
    lines += _extraction_rules()
    return "\n".join(lines)


def parse_image_data_uri(source: str) -> Tuple[str, bytes]:
    """
    Split a data URI ("data:image/png;base64,....") into mime type and bytes.

    The decoded payload must be an image Pillow can open.
    """
    if "," not in source:
        raise InvalidInput("Invalid image data format: expected a data URI like data:image/png;base64,...")

    header, payload = source.split(",", 1)
    mime_type = DEFAULT_IMAGE_MIME
    if ":" in header:
        declared = header.split(";")[0].split(":", 1)[1].strip()
        if declared:
            mime_type = declared

    try:
        data = base64.b64decode("".join(payload.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidInput("Invalid image data: payload is not valid base64") from e
    if not data:
        raise InvalidInput("Invalid image data: empty payload")

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
    except Exception as e:
        logger.warning(f"Rejected image payload ({mime_type}, {len(data)} bytes): {e}")
        raise InvalidInput("Invalid image data: payload is not a readable image") from e

    return mime_type, data


def extract_style_system(
    llm: GeminiClient,
    mode: Optional[str],
    source: Optional[str],
    max_source_chars: Optional[int] = None,
) -> StyleSystem:
    mode = validate_mode(mode)
    if not source or not source.strip():
        raise InvalidInput("Source is required")

    # the image is decoded and checked before the model is contacted
    image = parse_image_data_uri(source) if mode == "image" else None
    prompt = build_extraction_prompt(mode, source, max_source_chars)

    if image is not None:
        mime_type, data = image
        contents = [prompt, image_part(mime_type, data)]
    else:
        contents = prompt

    logger.info(f"Extracting style system (mode={mode}, source={len(source)} chars)")
    text = llm.generate(contents, json_output=True, use_fallback=True)
    return parse_style_system(text)


def analyse_style(
    llm: GeminiClient,
    mode: Optional[str],
    source: Optional[str],
    target_platform: str = "generic",
) -> Tuple[StyleSystem, str]:
    style_system = extract_style_system(llm, mode, source)
    return style_system, build_style_prompt(style_system, target_platform)
