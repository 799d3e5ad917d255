"""
Rewards module for the dungeon crawl simulator.

Contains the reward model, the generators for chest and kill rewards, the
currency ledger and the operations that credit or debit a player.
"""
