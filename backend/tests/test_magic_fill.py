import json

import pytest

from corestack.exceptions import InvalidInput, MalformedModelOutput
from corestack.schemas import DesignSystem, ProjectData, ProjectSkeleton, walk_entities
from corestack.services.magic_fill import (
    build_magic_fill_prompt,
    generate_project_skeleton,
    merge_project_skeleton,
)


def test_blank_idea_is_rejected_without_model_call(fake_llm):
    with pytest.raises(InvalidInput):
        generate_project_skeleton(fake_llm, "   ")
    assert fake_llm.calls == []


def test_skeleton_uses_primary_model_only(fake_llm):
    fake_llm.queue(json.dumps({"projectName": "Tasks", "flows": ["Login -> Board"]}))

    skeleton = generate_project_skeleton(fake_llm, "A kanban board")

    call = fake_llm.calls[0]
    assert call["use_fallback"] is False
    assert call["contents"] == [build_magic_fill_prompt(), "Project Idea: A kanban board"]
    assert skeleton.project_name == "Tasks"
    assert skeleton.entities is None


def test_colliding_entity_ids_are_regenerated(fake_llm):
    fake_llm.queue(json.dumps({
        "entities": [
            {"id": "1", "name": "User", "children": [{"id": "1", "name": "Profile", "children": []}]},
            {"id": "1", "name": "Order", "children": []},
        ],
    }))

    skeleton = generate_project_skeleton(fake_llm, "A shop")

    ids = [node.id for node in walk_entities(skeleton.entities)]
    assert len(ids) == 3
    assert len(set(ids)) == 3
    assert ids[0] == "1"


def test_malformed_skeleton_raises(fake_llm):
    fake_llm.queue("not json at all")
    with pytest.raises(MalformedModelOutput):
        generate_project_skeleton(fake_llm, "A shop")


def test_merge_only_replaces_with_truthy_values():
    existing = ProjectData(
        project_name="Existing",
        project_summary="Keep me",
        relationships=["User has many Orders"],
        notes="Private notes",
        design_system=DesignSystem(color_palette="pastel"),
    )
    skeleton = ProjectSkeleton.model_validate({
        "projectName": "Generated",
        "projectSummary": "",
        "entities": [{"id": "e1", "name": "Order"}],
        "relationships": [],
        "flows": ["Browse -> Buy"],
    })

    merged = merge_project_skeleton(existing, skeleton)

    assert merged.project_name == "Generated"
    assert merged.project_summary == "Keep me"
    assert merged.relationships == ["User has many Orders"]
    assert [node.name for node in merged.entities] == ["Order"]
    assert merged.flows == ["Browse -> Buy"]
    assert merged.notes == "Private notes"
    assert merged.design_system.color_palette == "pastel"


def test_merge_does_not_modify_inputs():
    existing = ProjectData(project_name="Existing")
    skeleton = ProjectSkeleton(project_name="Generated")

    merged = merge_project_skeleton(existing, skeleton)

    assert merged is not existing
    assert existing.project_name == "Existing"


def test_merge_of_empty_skeleton_keeps_draft():
    existing = ProjectData(project_name="Existing", flows=["A -> B"])
    assert merge_project_skeleton(existing, ProjectSkeleton()) == existing
