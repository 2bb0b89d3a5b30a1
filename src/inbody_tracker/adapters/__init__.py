"""
adapters - Delivery mechanisms (REST, CLI) on top of the ServiceFactory.
"""
