"""
terrainedit: surface-mesh CSG terrain editing for a multiplayer mining game.
"""
