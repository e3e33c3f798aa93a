"""
Field set, identity generation, models, validators and rule engine.
"""
