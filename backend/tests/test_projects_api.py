import json

from tests.fakes import STYLE_SYSTEM


def create_draft(client, headers, project_type="WEB_APP"):
    response = client.post("/api/projects/", json={"type": project_type}, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def test_create_web_app_draft_with_defaults(client, auth_headers):
    draft = create_draft(client, auth_headers)

    assert draft["metadata"]["name"] == "Untitled Project"
    assert draft["metadata"]["type"] == "WEB_APP"
    assert "lastModified" in draft["metadata"]
    assert draft["data"]["projectName"] == "Untitled Project"
    assert draft["data"]["designSystem"]["colorPalette"] == "monochrome"
    assert draft["data"]["entities"] == []


def test_create_agent_draft(client, auth_headers):
    draft = create_draft(client, auth_headers, "AGENT")

    assert draft["metadata"]["name"] == "Untitled Agent"
    assert draft["data"]["agentName"] == "Untitled Agent"
    assert draft["data"]["outputFormat"] == ""


def test_list_is_ordered_by_most_recent_change(client, auth_headers):
    first = create_draft(client, auth_headers)
    second = create_draft(client, auth_headers, "AGENT")

    ids = [item["id"] for item in client.get("/api/projects/", headers=auth_headers).json()]
    assert ids == [second["metadata"]["id"], first["metadata"]["id"]]

    data = dict(first["data"], projectName="Renamed")
    client.put(f"/api/projects/{first['metadata']['id']}", json={"data": data}, headers=auth_headers)

    index = client.get("/api/projects/", headers=auth_headers).json()
    assert [item["id"] for item in index] == [first["metadata"]["id"], second["metadata"]["id"]]
    assert index[0]["name"] == "Renamed"


def test_update_validates_by_type(client, auth_headers):
    draft = create_draft(client, auth_headers)
    draft_id = draft["metadata"]["id"]
    data = dict(draft["data"], entities=[
        {"id": "dup", "name": "User", "children": []},
        {"id": "dup", "name": "Order", "children": []},
    ])

    response = client.put(f"/api/projects/{draft_id}", json={"data": data}, headers=auth_headers)

    assert response.status_code == 400
    assert client.get(f"/api/projects/{draft_id}", headers=auth_headers).json()["data"]["entities"] == []


def test_blank_name_falls_back_to_untitled(client, auth_headers):
    draft = create_draft(client, auth_headers, "AGENT")
    data = dict(draft["data"], agentName="  ")

    response = client.put(f"/api/projects/{draft['metadata']['id']}", json={"data": data}, headers=auth_headers)

    assert response.json()["metadata"]["name"] == "Untitled Agent"


def test_drafts_are_private(client, auth_headers, register_user):
    draft = create_draft(client, auth_headers)
    other = register_user(username="mallory", email="mallory@example.com")
    other_headers = {"Authorization": f"Bearer {other['access_token']}"}

    response = client.get(f"/api/projects/{draft['metadata']['id']}", headers=other_headers)

    assert response.status_code == 404
    assert client.get("/api/projects/", headers=other_headers).json() == []


def test_delete_draft(client, auth_headers):
    draft_id = create_draft(client, auth_headers)["metadata"]["id"]

    assert client.delete(f"/api/projects/{draft_id}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/projects/{draft_id}", headers=auth_headers).status_code == 404


def test_render_prompt_with_style_system(client, auth_headers):
    draft_id = create_draft(client, auth_headers)["metadata"]["id"]

    plain = client.post(f"/api/projects/{draft_id}/prompt", json={}, headers=auth_headers).json()["prompt"]
    styled = client.post(
        f"/api/projects/{draft_id}/prompt",
        json={"styleSystem": STYLE_SYSTEM, "targetPlatform": "cursor"},
        headers=auth_headers,
    ).json()["prompt"]

    assert "- Name: Untitled Project" in plain
    assert "STYLE GUIDELINES" not in plain
    assert styled.startswith(plain.rstrip())
    assert "\n\n---\nSTYLE GUIDELINES\nUse the following design system" in styled


def test_render_agent_prompt(client, auth_headers):
    draft_id = create_draft(client, auth_headers, "AGENT")["metadata"]["id"]

    prompt = client.post(f"/api/projects/{draft_id}/prompt", json={}, headers=auth_headers).json()["prompt"]

    assert "## Agent Overview\n- Name: Untitled Agent" in prompt


def test_stateless_prompt_endpoints(client):
    project = client.post("/api/prompts/project", json={
        "project": {"projectName": "Shop", "flows": ["Login -> Cart"]},
        "stylePrompt": "Be blue.",
    })
    agent = client.post("/api/prompts/agent", json={"agent": {"agentName": "Bot"}})

    assert project.status_code == 200
    assert "- Login -> Cart" in project.json()["prompt"]
    assert project.json()["prompt"].endswith("STYLE GUIDELINES\nBe blue.")
    assert "- Name: Bot" in agent.json()["prompt"]


def test_magic_fill_merges_into_draft(client, auth_headers, fake_llm):
    draft = create_draft(client, auth_headers)
    draft_id = draft["metadata"]["id"]
    fake_llm.queue(json.dumps({
        "projectName": "Kanban",
        "projectSummary": "",
        "entities": [{"id": "b1", "name": "Board", "children": [{"id": "c1", "name": "Card", "children": []}]}],
        "flows": ["Login -> Board"],
    }))

    response = client.post(f"/api/projects/{draft_id}/magic-fill", json={"prompt": "A kanban app"}, headers=auth_headers)

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["metadata"]["name"] == "Kanban"
    assert body["data"]["entities"][0]["children"][0]["name"] == "Card"
    assert body["data"]["flows"] == ["Login -> Board"]
    assert body["data"]["designSystem"] == draft["data"]["designSystem"]


def test_failed_magic_fill_leaves_draft_unchanged(client, auth_headers, fake_llm):
    draft = create_draft(client, auth_headers)
    draft_id = draft["metadata"]["id"]
    fake_llm.queue("Sorry, I cannot help with that.")

    response = client.post(f"/api/projects/{draft_id}/magic-fill", json={"prompt": "A kanban app"}, headers=auth_headers)

    assert response.status_code == 500
    assert response.json()["error"] == "malformed_model_output"
    stored = client.get(f"/api/projects/{draft_id}", headers=auth_headers).json()
    assert stored["data"] == draft["data"]


def test_magic_fill_only_for_web_apps(client, auth_headers, fake_llm):
    draft_id = create_draft(client, auth_headers, "AGENT")["metadata"]["id"]

    response = client.post(f"/api/projects/{draft_id}/magic-fill", json={"prompt": "A bot"}, headers=auth_headers)

    assert response.status_code == 400
    assert fake_llm.calls == []
