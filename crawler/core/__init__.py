"""
Core system module for the dungeon crawl simulator.

This module contains the shared building blocks of the simulator: balance
constants and enumerations, the exception taxonomy, logging setup, random
helpers and the catalog repository.
"""
