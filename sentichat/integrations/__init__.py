"""
Integrations with the chat service and terminal front-ends.
"""
