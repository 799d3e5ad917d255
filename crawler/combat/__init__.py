"""
Combat module for the dungeon crawl simulator.

Contains the battle model, damage evaluation and the resolver that advances a
battle one simultaneous turn at a time.
"""
