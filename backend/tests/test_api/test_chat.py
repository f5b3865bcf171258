"""
Tests for the chat endpoints.
"""

from conftest import FakeLLMRouter, build_retriever
from api.dependencies import get_chat_service
from rag.chat import ChatService

QUESTION = "Who won the Monaco Grand Prix?"


def user_turn(content=QUESTION):
    return {"role": "user", "content": content}


class TestChatEndpoint:
    """Tests for POST /api/chat."""

    def test_streams_answer(self, client):
        response = client.post("/api/chat", json={"messages": [user_turn()]})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Leclerc won Monaco in 2024."

    def test_with_history(self, client):
        response = client.post(
            "/api/chat",
            json={
                "messages": [
                    {"role": "user", "content": "Hi"},
                    {"role": "assistant", "content": "Hello!"},
                    user_turn(),
                ]
            },
        )

        assert response.status_code == 200
        assert response.text

    def test_empty_messages(self, client):
        response = client.post("/api/chat", json={"messages": []})

        assert response.status_code == 400
        assert response.text == "No user message provided"

    def test_last_message_not_from_user(self, client):
        response = client.post(
            "/api/chat",
            json={"messages": [user_turn(), {"role": "assistant", "content": "Leclerc."}]},
        )

        assert response.status_code == 400
        assert response.text == "No user message provided"

    def test_malformed_body(self, client):
        response = client.post("/api/chat", json={"question": QUESTION})
        assert response.status_code == 422

    def test_generation_failure_returns_500(self, client, override_dependency):
        retriever, _, _ = build_retriever({})
        override_dependency(get_chat_service, ChatService(retriever, FakeLLMRouter(None)))

        response = client.post("/api/chat", json={"messages": [user_turn()]})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to process message"}

    def test_retrieval_failure_still_answers(self, client, override_dependency, chat_model):
        retriever, _, _ = build_retriever({}, failing={QUESTION, "Monaco Formula 1"})
        override_dependency(get_chat_service, ChatService(retriever, FakeLLMRouter(chat_model)))

        response = client.post("/api/chat", json={"messages": [user_turn()]})

        assert response.status_code == 200
        assert response.text == "Leclerc won Monaco in 2024."


class TestChatCompleteEndpoint:
    """Tests for POST /api/chat/complete."""

    def test_answer_with_sources(self, client):
        response = client.post("/api/chat/complete", json={"messages": [user_turn()]})

        assert response.status_code == 200
        data = response.json()
        assert data["answer"] == "Leclerc won Monaco in 2024."
        assert data["sources"][0]["title"] == "2024 Monaco Grand Prix Results"
        assert data["sources"][0]["source"] == "ergast"

    def test_no_user_message(self, client):
        response = client.post("/api/chat/complete", json={"messages": []})
        assert response.status_code == 400

    def test_generation_failure(self, client, override_dependency):
        retriever, _, _ = build_retriever({})
        override_dependency(get_chat_service, ChatService(retriever, FakeLLMRouter(None)))

        response = client.post("/api/chat/complete", json={"messages": [user_turn()]})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to process message"}
