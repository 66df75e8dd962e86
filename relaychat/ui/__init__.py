"""NiceGUI interface - thin presentation layer over the chat controller.

Responsibilities:
    - Sidebar with conversation history, pin toggle and clear/delete actions
    - Message list grouped by turn, with streaming updates
    - Input bar with voice input through the transcription endpoint
    - Error banner, dark mode and streaming toggles

Holds only transient UI state. Conversation state lives in
relaychat.state and reaches the relay through relaychat.client.
"""
