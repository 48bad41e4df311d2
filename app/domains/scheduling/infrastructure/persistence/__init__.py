"""
Scheduling persistence models.
"""
