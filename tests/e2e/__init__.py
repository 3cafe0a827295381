"""
End-to-End tests for bridge migration

Runs the scenario against a real conferencing deployment:
- Pin conference to a bridge → shut it down → participants drop → participants recover

Run with: pytest tests/e2e/ -v -m e2e
"""
