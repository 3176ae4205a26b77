"""
Unit tests for Chat Relay.

Test individual components in isolation:
- Retry state machine and retrying completion client
- OpenAI client status/response mapping (httpx.MockTransport)
- Prompt builder and call parameter models
- Per-client rate limiter
- Settings and dependency providers
"""
