"""
Core of idlforge: IR model, loader, lookup, and the generation pipeline.
"""
