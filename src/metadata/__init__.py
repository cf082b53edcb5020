"""Document metadata decoding.

This module turns the keyed-archive metadata member into plain values.
"""
