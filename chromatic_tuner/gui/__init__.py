"""
Qt user interface for the chromatic tuner.
"""
