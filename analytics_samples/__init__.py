"""
Google Analytics Admin and Data API quickstart samples.
"""
