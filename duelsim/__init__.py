"""
Source tree of the duel combat simulator.

The directory holds the core, items, combatant and combat packages, which
import each other as top-level packages, and the main.py demo driver.
"""
