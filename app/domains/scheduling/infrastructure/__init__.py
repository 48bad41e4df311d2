"""
Scheduling Infrastructure Layer

Database repositories, catalog cache and audit adapters.
"""
