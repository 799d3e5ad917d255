"""
Character module for the dungeon crawl simulator.

Contains the canonical combatant (Actor), hero templates, monster templates
and their floor scaling, and the per-player state.
"""
