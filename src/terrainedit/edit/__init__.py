"""
The EDIT layer describes edit intents (brushes) and the volumes they act on.
It never mutates the world; the core layer interprets brushes.
"""
