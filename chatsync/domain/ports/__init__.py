"""
PORTS - Interfaces that infrastructure implements

- document_store.py     → persistent document store (memory, Redis)
- generative_client.py  → text-generation service (Gemini)
- repositories/         → entity persistence on top of the document store
"""
