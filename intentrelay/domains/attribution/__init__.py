"""
Deferred deep-link attribution domain
"""
