"""
Integration tests against a real Redis server.

Enabled with USE_REAL_REDIS=1; REDIS_HOST / REDIS_PORT select the server.
Each test uses its own namespace and cleans it up afterwards.
"""
