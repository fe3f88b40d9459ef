"""Shippo Slot: a three-reel sentence slot machine for Japanese practice."""
