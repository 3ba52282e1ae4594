"""
Business domains for IntentRelay
"""
