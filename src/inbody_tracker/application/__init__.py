"""
application - Use-case services orchestrating domain logic through ports.

Depends on domain/ only. Never imports from infrastructure/ or adapters/.
"""
