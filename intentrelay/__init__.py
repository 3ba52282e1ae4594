"""
IntentRelay: deferred deep-link attribution service
"""

__version__ = "1.0.0"
