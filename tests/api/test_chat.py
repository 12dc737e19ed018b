import json

import httpx

from chat_core import metrics


def test_chat_happy_path_and_title(make_client):
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"response": "  こんにちは！\n"})

    client, manager = make_client(handler)
    sid = client.post("/api/sessions").json()["id"]
    r = client.post("/api/chat", json={"sessionId": sid, "message": "こんにちは"})
    assert r.status_code == 200
    assert r.json() == {"response": "こんにちは！", "sessionId": sid}

    session = manager.get(sid)
    assert session.title == "こんにちは"
    assert [(m.role, m.content) for m in session.messages] == [
        ("user", "こんにちは"),
        ("assistant", "こんにちは！"),
    ]
    assert seen == [
        {
            "model": "gemma",
            "prompt": (
                "以下は日本語での会話です。ユーザーの質問に対して、丁寧に回答してください。"
                "\n\nユーザー: こんにちは\nアシスタント:"
            ),
            "stream": False,
            "temperature": 0.7,
        }
    ]
    assert metrics.counter_value("chat_turns_total", {"status": "ok"}) == 1


def test_chat_prompt_includes_history(make_client):
    prompts = []

    def handler(request):
        prompts.append(json.loads(request.content)["prompt"])
        return httpx.Response(200, json={"response": f"a{len(prompts)}"})

    client, manager = make_client(handler)
    sid = manager.current_session_id
    client.post("/api/chat", json={"sessionId": sid, "message": "q1"})
    client.post("/api/chat", json={"sessionId": sid, "message": "q2"})
    assert prompts[1].endswith(
        "ユーザー: q1\nアシスタント: a1\nユーザー: q2\nアシスタント:"
    )
    # title only derived on the first exchange
    assert manager.get(sid).title == "q1"
    assert len(manager.get(sid).messages) == 4


def test_chat_long_message_title_truncated(make_client):
    client, manager = make_client()
    sid = manager.current_session_id
    message = "あ" * 31
    client.post("/api/chat", json={"sessionId": sid, "message": message})
    assert manager.get(sid).title == "あ" * 30 + "..."


def test_chat_unknown_session_creates_one(make_client):
    client, manager = make_client()
    seeded = manager.current_session_id
    r = client.post("/api/chat", json={"sessionId": "ghost", "message": "hi"})
    assert r.status_code == 200
    new_id = r.json()["sessionId"]
    assert new_id not in {"ghost", seeded}
    listed = client.get("/api/sessions").json()
    assert listed["currentSessionId"] == new_id
    assert len(listed["sessions"]) == 2


def test_chat_without_session_id_creates_one(make_client):
    client, manager = make_client()
    r = client.post("/api/chat", json={"message": "hi"})
    assert r.status_code == 200
    assert r.json()["sessionId"] == manager.current_session_id
    assert len(manager.store) == 2


def test_chat_promotes_existing_session(make_client):
    client, manager = make_client()
    seeded = manager.current_session_id
    client.post("/api/sessions")
    client.post("/api/chat", json={"sessionId": seeded, "message": "hi"})
    assert manager.current_session_id == seeded


def test_chat_rejects_missing_or_non_string_message(make_client):
    client, manager = make_client()
    sid = manager.current_session_id
    for body in (
        {"sessionId": sid},
        {"sessionId": sid, "message": ""},
        {"sessionId": sid, "message": 42},
        {"sessionId": sid, "message": ["x"]},
        ["not", "an", "object"],
    ):
        r = client.post("/api/chat", json=body)
        assert r.status_code == 400
        assert r.json() == {"error": "メッセージが必要です"}
    assert manager.get(sid).messages == []


def test_chat_unparseable_json_is_400(make_client):
    client, manager = make_client()
    sid = manager.current_session_id
    r = client.post(
        "/api/chat",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json() == {"error": "メッセージが必要です"}
    assert manager.get(sid).messages == []


def test_chat_backend_unreachable_is_503_and_keeps_user_turn(make_client):
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    client, manager = make_client(handler)
    sid = manager.current_session_id
    title = manager.get(sid).title
    r = client.post("/api/chat", json={"sessionId": sid, "message": "hello"})
    assert r.status_code == 503
    assert r.json() == {
        "error": (
            "Ollamaサーバーに接続できません。"
            "Ollamaが起動していることを確認してください。"
        )
    }
    session = manager.get(sid)
    assert [(m.role, m.content) for m in session.messages] == [
        ("user", "hello")
    ]
    assert session.title == title
    assert metrics.counter_value(
        "chat_turns_total", {"status": "backend-unavailable"}
    ) == 1


def test_chat_model_missing_is_404(make_client):
    def handler(request):
        return httpx.Response(404, json={"error": "model 'gemma' not found"})

    client, manager = make_client(handler)
    sid = manager.current_session_id
    r = client.post("/api/chat", json={"sessionId": sid, "message": "hello"})
    assert r.status_code == 404
    assert "ollama pull gemma" in r.json()["error"]
    assert len(manager.get(sid).messages) == 1


def test_chat_other_backend_failure_is_500(make_client):
    def handler(request):
        return httpx.Response(500, text="boom")

    client, manager = make_client(handler)
    sid = manager.current_session_id
    r = client.post("/api/chat", json={"sessionId": sid, "message": "hello"})
    assert r.status_code == 500
    assert r.json() == {"error": "内部サーバーエラーが発生しました"}


def test_chat_malformed_backend_body_is_500(make_client):
    def handler(request):
        return httpx.Response(200, json={"unexpected": True})

    client, _ = make_client(handler)
    r = client.post("/api/chat", json={"message": "hello"})
    assert r.status_code == 500


def test_chat_error_counted_in_http_metrics(make_client):
    client, _ = make_client()
    client.post("/api/chat", json={})
    assert metrics.counter_value(
        "api_request_errors_total",
        {"route": "/api/chat", "method": "POST", "status": 400},
    ) == 1
