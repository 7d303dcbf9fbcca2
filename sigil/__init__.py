"""Sigil -- triangular fiducial marker decoder.

A sigil is an equilateral triangle split into 16 sub-triangles, each
carrying one bit as dark/light contrast: two anchor cells, one sync
cell, 9 data bits and 4 parity bits. The decoder samples the cells in
canonical space, resolves which of the three 120-degree rotations the
marker was captured in, validates parity and reads a 9-bit id. A
confirmation tracker debounces per-frame reads into a locked id.
"""
