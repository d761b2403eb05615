"""
Magic fill: expand a one-line project idea into a draft project skeleton.
"""
import logging
from typing import List, Optional, Set

from corestack.exceptions import InvalidInput
from corestack.schemas import EntityNode, ProjectData, ProjectSkeleton, new_node_id
from corestack.services.llm_client import GeminiClient
from corestack.services.response_parser import parse_project_skeleton

logger = logging.getLogger(__name__)

MERGED_FIELDS = ("project_name", "project_summary", "entities", "relationships", "flows")


def build_magic_fill_prompt() -> str:
    return "\n".join([
        "You are a system architect.",
        "I will give you a project idea.",
        "You must return a valid JSON object with this exact structure:",
        "{",
        '  "projectName": "string",',
        '  "projectSummary": "string",',
        '  "entities": [',
        '    { "id": "string", "name": "string", "children": [] }',
        "  ],",
        '  "relationships": ["string"],',
        '  "flows": ["string"]',
        "}",
        "",
        "Rules:",
        "1. 'entities' should be a hierarchical tree if possible (e.g. User -> Profile).",
        "2. 'flows' should be simple steps separated by ' -> ' (e.g. \"Login -> Dashboard\").",
        "3. Return ONLY the JSON. No markdown formatting.",
    ])


def _unique_ids(nodes: List[EntityNode], seen: Optional[Set[str]] = None) -> None:
    seen = set() if seen is None else seen
    for node in nodes:
        if not node.id or node.id in seen:
            node.id = new_node_id()
            while node.id in seen:
                node.id = new_node_id()
        seen.add(node.id)
        _unique_ids(node.children, seen)


def generate_project_skeleton(llm: GeminiClient, idea: Optional[str]) -> ProjectSkeleton:
    if not idea or not idea.strip():
        raise InvalidInput("Prompt is required")

    text = llm.generate(
        [build_magic_fill_prompt(), f"Project Idea: {idea.strip()}"],
        json_output=True,
        use_fallback=False,
    )
    skeleton = parse_project_skeleton(text)
    if skeleton.entities:
        _unique_ids(skeleton.entities)
    logger.info(f"Magic fill produced {len(skeleton.entities or [])} top-level entities")
    return skeleton


def merge_project_skeleton(existing: ProjectData, skeleton: ProjectSkeleton) -> ProjectData:
    """
    Overlay a skeleton on a draft. Only truthy skeleton values replace
    existing ones; the input draft is not modified.
    """
    merged = existing.model_copy(deep=True)
    for field in MERGED_FIELDS:
        value = getattr(skeleton, field)
        if value:
            setattr(merged, field, value)
    return ProjectData.model_validate(merged.model_dump())
