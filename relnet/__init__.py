"""
Relnet: Character Relationship Network Editor

View and incrementally edit a small graph of characters and signed,
typed relationships stored in a portable SQLite snapshot.

Modules:
- store: Snapshot store over an in-memory SQLite image
- graph: View model projection and the rendered graph model
- interaction: View/Edit state machine driven by user gestures
- publish: Snapshot export and manual publish workflow
- models: Data models and relationship types
- scripts: CLI tools
"""

__version__ = "0.1.0"
