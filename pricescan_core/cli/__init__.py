"""
pricescan command line tools
"""
