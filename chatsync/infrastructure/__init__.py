"""
INFRASTRUCTURE LAYER - adapters for the document store and the generative service.
"""
