"""
Agents used by the DocChat runtime.

For now there is a single ConversationController that:

- receives a document and turns it into a grounding context
- records user / assistant turns in order
- asks the chat transport for answers, one exchange at a time
"""
