"""
HTTP API package for the Business Card Extraction API.
"""
