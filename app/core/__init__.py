"""
Core architecture components shared by the scheduling domain
"""
