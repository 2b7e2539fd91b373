"""
Interactive chat front-ends.
"""
