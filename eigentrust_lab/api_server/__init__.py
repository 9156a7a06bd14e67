"""
HTTP API over the trust engine (FastAPI).
"""
