"""
Core infrastructure for IntentRelay
"""
