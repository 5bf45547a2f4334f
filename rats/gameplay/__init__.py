"""
Gameplay systems for Rats. NO UI DEPENDENCIES.
"""
