"""
Crawler package for the dungeon crawl simulator.

This package contains the simulation core: floor scaling, monster catalogs,
exploration encounters, the combat resolver, chests, rewards and the player
economy.
"""
