"""
Progression module for the dungeon crawl simulator.

Contains the floor-indexed scaling formulas and the per-player floor state.
"""
