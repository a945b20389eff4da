"""
tabrunner

Tab command layer of a browser automation runner.
"""
