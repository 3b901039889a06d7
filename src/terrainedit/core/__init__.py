"""
The CORE layer owns the mutable game state: the terrain mesh, players and
their inventories. It interprets brushes; it never renders anything.
"""
