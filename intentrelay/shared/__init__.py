"""
Shared constants and helpers for IntentRelay
"""
