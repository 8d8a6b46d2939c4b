"""
Shared Kernel

Base classes and utilities shared by every domain app: domain events,
value objects, the error taxonomy, the unit of work and the message bus.
"""
