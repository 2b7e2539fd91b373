"""
Core session state, models and views
"""
