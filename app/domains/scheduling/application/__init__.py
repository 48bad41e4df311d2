"""
Scheduling Application Layer

Ports, application services and use cases.
"""
