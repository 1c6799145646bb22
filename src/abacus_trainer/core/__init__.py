"""
Module: core

Purpose:
    Domain models shared by every rule and generator: digit states,
    bead actions, generated examples, and rule-config schema validation.
"""
