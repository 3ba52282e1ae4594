"""
HTTP API for IntentRelay
"""
