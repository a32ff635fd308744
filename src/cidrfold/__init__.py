"""
cidrfold - IP address, range and CIDR toolkit

Parses address, CIDR and range expressions and collapses collections of
them into minimal sets of CIDR blocks, for both IPv4 and IPv6.
"""

__version__ = "0.1.0"
