"""Minimal demonstration of incremental streaming output."""

from dial_client import DialChatCompletions, HttpxTransport, Message, Role
from dial_client.config import load_settings

if __name__ == "__main__":
    cfg = load_settings()
    cfg.require_connection()
    chat = DialChatCompletions(HttpxTransport.from_settings(cfg), deployment_name=cfg.deployment, api_key=cfg.api_key)
    question = "请用三句话介绍 Server-Sent Events"
    payload = {"messages": [Message(Role.SYSTEM, cfg.system_prompt), Message(Role.USER, question)]}
    print("User:", question)
    print("Assistant: ", end="", flush=True)
    with chat.stream_text(payload) as deltas:
        for delta in deltas:
            print(delta, end="", flush=True)
    print()
