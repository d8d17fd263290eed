"""
Chat transports for the DocChat runtime.

Includes:
- ChatTransport: the boundary contract used by ConversationController
- HttpChatTransport: calls the backend's /ai/chat endpoint
- OpenAIChatTransport: calls an OpenAI-compatible chat completion directly
"""
