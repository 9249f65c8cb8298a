# Services package init
"""
NoteFlow Backend — Services Layer
===================================

Service Inventory:
    - CompletionClient (abstract): one chat-completion call, messages in, text out
    - OpenAICompletionClient: CompletionClient over the OpenAI Chat Completions API
    - prompts: pure prompt-building functions, one per AI operation
    - AIService: runs the AI operations against an injected CompletionClient
    - NoteService: note CRUD over an AsyncSession
    - AuthService: bcrypt sign-in and user provisioning
"""
