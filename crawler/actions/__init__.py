"""
Actions module for the dungeon crawl simulator.

Contains the ability and spell catalog models and the action a combatant
submits for one turn of combat.
"""
