"""
OpenAI chat-completions package.

Exports:
- OpenAIChatClient: client bound to one configuration snapshot
- configure, chat, stream_chat, chat_stream, chat_json: module-level entry
  points using the shared configuration
"""

from .client import OpenAIChatClient, chat, chat_json, chat_stream, configure, stream_chat

__all__ = ["OpenAIChatClient", "configure", "chat", "stream_chat", "chat_stream", "chat_json"]
