"""
Items module for the dungeon crawl simulator.

Contains the weapon catalog model, chest templates and the scaled potions
that drop in the dungeon.
"""
