"""Document handle layer.

This module combines container access and metadata decoding
behind a single handle per open document.
"""
