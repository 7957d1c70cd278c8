"""todos/ -- Todos, manager assignments and comments.

Layer rule: todos/ may import from core/ and auth/. It does NOT import from api/.
"""
