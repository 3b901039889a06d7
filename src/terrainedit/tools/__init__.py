"""
Concrete tools. Each maps a player and an aim point to a brush.
"""
from terrainedit.tools.tool import Tool
from terrainedit.tools.axe import Axe
from terrainedit.tools.pickaxe import Pickaxe
from terrainedit.tools.shovel import Shovel

__all__ = ["Tool", "Axe", "Pickaxe", "Shovel"]
