"""
Comfy Gallery Scanner backend: generation-metadata extraction, scanning and HTTP API.
"""
