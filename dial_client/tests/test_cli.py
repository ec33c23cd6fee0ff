import io

import pytest

from dial_client.cli import app as cli_app
from dial_client.cli.app import Application, main
from dial_client.cli.question import Question
from dial_client.domain.exceptions import ConsoleInputError, TransportError
from dial_client.domain.models import Message, Role

CONFIG_ENV = [
    "DIAL_BASE_URI",
    "DIAL_DEPLOYMENT",
    "DIAL_CONFIG_FILE",
    "DIAL_CA_BUNDLE",
    "CURL_CA_BUNDLE",
    "SSL_CERT_FILE",
    "DIAL_LOG_DIR",
]


def scripted(*answers):
    items = list(answers)
    prompts = []

    def reader(prompt):
        prompts.append(prompt)
        if not items:
            raise EOFError
        return items.pop(0)

    return reader, prompts


def test_question_default_and_trim():
    reader, prompts = scripted("", "  hello  ")
    q = Question(reader)
    assert q.ask("System prompt", "default") == "default"
    assert prompts[0] == "System prompt (Enter for default): "
    assert q.ask("You") == "hello"
    assert prompts[1] == "You: "


def test_question_eof():
    reader, _ = scripted()
    q = Question(reader)
    assert q.ask("System prompt", "fallback") == "fallback"
    with pytest.raises(ConsoleInputError):
        q.ask("You")


class FakeChat:
    def __init__(self):
        self.payloads = []

    def create(self, payload):
        self.payloads.append(payload)
        return Message(Role.ASSISTANT, f"answer {len(self.payloads)}")

    def stream_text(self, payload):
        self.payloads.append(payload)
        return FakeTextStream(["an", "swer"])


class FakeTextStream:
    def __init__(self, parts):
        self._parts = iter(parts)

    def __iter__(self):
        return self._parts

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def test_application_chat_loop():
    reader, _ = scripted("", "first", "second", "exit")
    out = io.StringIO()
    chat = FakeChat()
    app = Application(chat, "be brief", question=Question(reader), out=out)
    assert app.run() == 0

    assert len(chat.payloads) == 2
    second = chat.payloads[1]["messages"]
    assert second == [
        {"role": "system", "content": "be brief"},
        {"role": "user", "content": "first"},
        {"role": "assistant", "content": "answer 1"},
        {"role": "user", "content": "second"},
    ]
    assert "Assistant: answer 2" in out.getvalue()
    assert len(app.conversation) == 5


def test_application_streaming():
    reader, _ = scripted("q", "EXIT")
    out = io.StringIO()
    app = Application(FakeChat(), "sys", question=Question(reader), out=out)
    assert app.run(stream=True) == 0
    assert "Assistant: answer\n" in out.getvalue()
    assert app.conversation.get_messages()[-1] == Message(Role.ASSISTANT, "answer")


def test_application_reports_transport_error():
    class BrokenChat(FakeChat):
        def create(self, payload):
            raise TransportError(code="NETWORK_ERROR", message="refused")

    reader, _ = scripted("q")
    out = io.StringIO()
    app = Application(BrokenChat(), "sys", question=Question(reader), out=out)
    assert app.run() == 1
    assert "HTTP request failed: refused" in out.getvalue()


def test_main_reports_missing_config(monkeypatch, capsys, tmp_path):
    for key in CONFIG_ENV:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    assert main(["sys prompt"]) == 2
    assert "DIAL_BASE_URI" in capsys.readouterr().err


def test_main_builds_application(monkeypatch, tmp_path):
    for key in CONFIG_ENV:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DIAL_BASE_URI", "https://dial.example.com")
    monkeypatch.setenv("DIAL_DEPLOYMENT", "gpt")
    captured = {}

    def fake_run(self, stream=False):
        captured["stream"] = stream
        captured["system"] = self.conversation.get_messages()[0].content
        captured["deployment"] = self._chat._deployment_name
        return 0

    monkeypatch.setattr(cli_app.Application, "run", fake_run)
    assert main(["be nice", "--stream"]) == 0
    assert captured == {"stream": True, "system": "be nice", "deployment": "gpt"}
