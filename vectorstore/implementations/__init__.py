"""
Vector store backends. Importing a module registers its backend.
"""
