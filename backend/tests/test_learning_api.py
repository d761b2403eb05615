import json

from corestack import models
from tests.fakes import COURSE


def create_topic(client, headers, **fields):
    body = {"title": "SQL"}
    body.update(fields)
    response = client.post("/api/learning/topics", json=body, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def test_create_topic_defaults(client, auth_headers):
    topic = create_topic(client, auth_headers, description="Relational queries")

    assert topic["status"] == "idea"
    assert topic["difficulty"] == "basic"
    assert topic["priority"] == "medium"


def test_topics_listed_newest_first(client, auth_headers):
    first = create_topic(client, auth_headers, title="First")
    second = create_topic(client, auth_headers, title="Second")

    topics = client.get("/api/learning/topics", headers=auth_headers).json()

    assert [t["id"] for t in topics] == [second["id"], first["id"]]


def test_generate_course_requires_auth(client):
    assert client.post("/api/generate-course", json={"topicId": 1}).status_code == 401


def test_generate_course_requires_topic_id(client, auth_headers, fake_llm):
    response = client.post("/api/generate-course", json={}, headers=auth_headers)

    assert response.status_code == 400
    assert fake_llm.calls == []


def test_generate_course_unknown_or_foreign_topic(client, auth_headers, register_user, fake_llm):
    topic = create_topic(client, auth_headers)
    other = register_user(username="mallory", email="mallory@example.com")
    other_headers = {"Authorization": f"Bearer {other['access_token']}"}

    assert client.post("/api/generate-course", json={"topicId": 9999}, headers=auth_headers).status_code == 404
    assert client.post("/api/generate-course", json={"topicId": topic["id"]}, headers=other_headers).status_code == 404
    assert fake_llm.calls == []


def test_generate_course_persists_ordered_course(client, auth_headers, fake_llm):
    topic = create_topic(client, auth_headers, contextArea="Backend")
    fake_llm.queue(json.dumps(COURSE))

    response = client.post("/api/generate-course", json={"topicId": topic["id"]}, headers=auth_headers)

    assert response.status_code == 200, response.text
    course_id = response.json()["courseId"]

    course = client.get(f"/api/learning/courses/{course_id}", headers=auth_headers).json()
    assert course["status"] == "active"
    assert "Topic: SQL" in course["source_prompt"]
    assert [m["title"] for m in course["modules"]] == ["Selecting", "Joining"]
    assert [l["order_index"] for l in course["modules"][0]["lessons"]] == [0, 1]

    detail = client.get(f"/api/learning/topics/{topic['id']}", headers=auth_headers).json()
    assert [c["id"] for c in detail["courses"]] == [course_id]


def test_invalid_course_output_writes_nothing(client, auth_headers, fake_llm, db_session):
    topic = create_topic(client, auth_headers)
    fake_llm.queue(json.dumps(dict(COURSE, modules=[])))

    response = client.post("/api/generate-course", json={"topicId": topic["id"]}, headers=auth_headers)

    assert response.status_code == 500
    assert response.json()["error"] == "schema_validation_error"
    assert db_session.query(models.Course).count() == 0
    assert db_session.query(models.CourseModule).count() == 0


def test_course_of_another_user_is_hidden(client, auth_headers, register_user, fake_llm):
    topic = create_topic(client, auth_headers)
    fake_llm.queue(json.dumps(COURSE))
    course_id = client.post("/api/generate-course", json={"topicId": topic["id"]}, headers=auth_headers).json()["courseId"]
    other = register_user(username="mallory", email="mallory@example.com")

    response = client.get(
        f"/api/learning/courses/{course_id}",
        headers={"Authorization": f"Bearer {other['access_token']}"},
    )

    assert response.status_code == 404
