import pytest

from corestack.exceptions import ConfigurationError, ModelInvocationError
from corestack.services.llm_client import GeminiClient, get_llm_client
from tests.fakes import FakeSdkClient


def make_client(outcomes):
    return GeminiClient(
        primary_model="primary-model",
        fallback_model="fallback-model",
        timeout=5,
        client=FakeSdkClient(outcomes),
    )


def test_primary_success_never_calls_fallback():
    llm = make_client({"primary-model": '{"ok": true}', "fallback-model": "unused"})

    assert llm.generate("prompt") == '{"ok": true}'
    assert [call["model"] for call in llm._client.models.calls] == ["primary-model"]


def test_fallback_called_once_with_identical_contents():
    llm = make_client({"primary-model": RuntimeError("quota exceeded"), "fallback-model": '{"ok": true}'})
    contents = ["system prompt", "user prompt"]

    assert llm.generate(contents) == '{"ok": true}'

    calls = llm._client.models.calls
    assert [call["model"] for call in calls] == ["primary-model", "fallback-model"]
    assert calls[0]["contents"] == calls[1]["contents"] == contents


def test_both_models_failing_names_both():
    llm = make_client({"primary-model": RuntimeError("down"), "fallback-model": RuntimeError("also down")})

    with pytest.raises(ModelInvocationError) as exc_info:
        llm.generate("prompt")

    assert exc_info.value.models == ["primary-model", "fallback-model"]
    assert "primary-model" in exc_info.value.message
    assert "fallback-model" in exc_info.value.message


def test_fallback_disabled_raises_primary_error():
    llm = make_client({"primary-model": RuntimeError("down"), "fallback-model": '{"ok": true}'})

    with pytest.raises(ModelInvocationError) as exc_info:
        llm.generate("prompt", use_fallback=False)

    assert exc_info.value.models == ["primary-model"]
    assert len(llm._client.models.calls) == 1


def test_empty_response_counts_as_invocation_failure():
    llm = make_client({"primary-model": "", "fallback-model": '{"ok": true}'})

    assert llm.generate("prompt") == '{"ok": true}'


def test_json_output_requests_json_mime_type():
    llm = make_client({"primary-model": "{}", "fallback-model": "{}"})

    llm.generate("prompt", json_output=True)
    llm.call_model("primary-model", "Test", json_output=False)

    json_config, text_config = [call["config"] for call in llm._client.models.calls]
    assert json_config.response_mime_type == "application/json"
    assert text_config is None


def test_check_models_reports_each_model():
    llm = make_client({"primary-model": "Hello", "fallback-model": RuntimeError("not found")})

    results = llm.check_models(["primary-model", "fallback-model"])

    assert results[0] == {"model": "primary-model", "ok": True, "error": None}
    assert results[1]["ok"] is False
    assert "not found" in results[1]["error"]


def test_get_llm_client_requires_api_key(monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    with pytest.raises(ConfigurationError) as exc_info:
        get_llm_client()

    assert "GOOGLE_API_KEY" in exc_info.value.message
