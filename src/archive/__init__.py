"""Container access layer.

This module opens document zip containers and resolves member names.
It also reconstructs the ordered timelapse segment sequence.
"""
