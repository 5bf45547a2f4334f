"""
Thin pyunicodegame/pygame adapters over rats.gameplay.
"""
