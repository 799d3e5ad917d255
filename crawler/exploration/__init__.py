"""
Exploration module for the dungeon crawl simulator.

Contains the per-visit encounter roll, the random monster picker, hidden
rooms, treasure, and the chest and mimic rules.
"""
