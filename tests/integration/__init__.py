"""
Integration tests for Chat Relay.

Drive the full FastAPI app (middleware, routes, exception handlers) through
TestClient with a scripted upstream client.
"""
